from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.core.security import generate_token
from teamtasks.db.queries import delete_resources, find_all, insert_resource, update_resource
from teamtasks.models.authentication import Authentication
from teamtasks.models.user import User


async def start_session(db: AsyncSession, user: User, now: Optional[datetime] = None) -> Authentication:
    """
    Hand out the user's live token with a refreshed expiry, or a new one.

    Expired tokens of the user are deleted on the way.
    """
    now = now or datetime.now(timezone.utc)
    sessions = await find_all(db, Authentication, [("user_id", user.id)])

    live = None
    for session in sessions:
        if session.expires_at is not None and session.expires_at > now:
            live = session
        else:
            await delete_resources(db, Authentication, [("id", session.id)])

    if live is not None:
        return await update_resource(db, Authentication, live.id, [])
    return await insert_resource(db, Authentication, [("user_id", user.id), ("token", generate_token())])
