"""
Bearer token extraction and verification.

Tokens are opaque strings stored in the authentications table. Every
request re-verifies its token against the database.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.core.errors import ApiError, AuthenticationError
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import find_one
from teamtasks.models.authentication import Authentication


@dataclass(frozen=True)
class RawToken:
    value: str = ""

    @classmethod
    def from_header(cls, authorization: Optional[str]) -> "RawToken":
        """Second word of the Authorization header; empty when absent."""
        if not authorization:
            return cls()
        parts = authorization.split(" ")
        return cls(parts[1] if len(parts) > 1 else "")

    def __bool__(self) -> bool:
        return bool(self.value)


@dataclass(frozen=True)
class VerifiedToken:
    raw_token: str
    user_id: str
    expires_at: datetime

    @classmethod
    async def from_raw(cls, db: AsyncSession, raw: RawToken, now: Optional[datetime] = None) -> "VerifiedToken":
        """
        Raises:
            ApiError 401: InvalidToken when the token is empty or unknown,
                TokenExpired when its expiry is missing or past
        """
        if not raw:
            raise ApiError(401, AuthenticationError.InvalidToken)
        try:
            authentication = await find_one(db, Authentication, [("token", raw.value)])
        except ResourceNotFoundError:
            raise ApiError(401, AuthenticationError.InvalidToken)

        now = now or datetime.now(timezone.utc)
        if authentication.expires_at is None or authentication.expires_at < now:
            raise ApiError(401, AuthenticationError.TokenExpired)

        return cls(raw.value, authentication.user_id, authentication.expires_at)
