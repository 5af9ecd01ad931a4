from typing import Optional

from fastapi import Depends, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.token import RawToken, VerifiedToken
from teamtasks.core.errors import ApiError, TeamError, UserError
from teamtasks.core.permissions import Action, Resource
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import find_one_unarchived
from teamtasks.db.session import SessionAsync
from teamtasks.models.team import Team
from teamtasks.models.user import User
from teamtasks.services.teams import TeamContext, get_team_context

authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Bearer token returned by POST /api/auth",
)


async def get_db():
    async with SessionAsync() as session:
        yield session


def get_raw_token(authorization: Optional[str] = Depends(authorization_header)) -> RawToken:
    return RawToken.from_header(authorization)


async def get_verified_token(
    raw_token: RawToken = Depends(get_raw_token),
    db: AsyncSession = Depends(get_db),
) -> VerifiedToken:
    return await VerifiedToken.from_raw(db, raw_token)


async def get_current_user(
    token: VerifiedToken = Depends(get_verified_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    try:
        return await find_one_unarchived(db, User, [("id", token.user_id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, UserError.UserNotFound)


# ==================== Permission Dependencies ====================


async def get_team_member_context(
    team_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> TeamContext:
    """
    Team context for the current user, as owner or accepted invitee.

    Raises:
        ApiError 404: If the team does not exist
        ApiError 403: If the user is neither owner nor member
    """
    try:
        context = await get_team_context(db, team_id, current_user)
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, TeamError.TeamNotFound)

    if context is None:
        raise ApiError(status.HTTP_403_FORBIDDEN, TeamError.TeamAccessDenied)
    return context


def require_permission(resource: Resource, action: Action):
    """
    Factory to create a dependency that checks if user has permission.

    Usage:
        @router.post("/{team_id}/activities")
        async def create_activity(
            team_id: str,
            context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.CREATE)),
            db: AsyncSession = Depends(get_db)
        ):
            ...
    """
    async def permission_checker(
        context: TeamContext = Depends(get_team_member_context)
    ) -> TeamContext:
        if not context.can(resource, action):
            raise ApiError(
                status.HTTP_403_FORBIDDEN,
                TeamError.TeamAccessDenied,
                f"Insufficient permissions: {action.value} on {resource.value}",
            )
        return context

    return permission_checker


async def require_team_owner(
    team_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Team:
    """
    Unarchived team owned by the current user.

    Raises:
        ApiError 404: If the team does not exist or belongs to someone else
    """
    try:
        return await find_one_unarchived(db, Team, [("id", team_id), ("owner_id", current_user.id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, TeamError.TeamNotFound)
