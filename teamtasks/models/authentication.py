import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String

from teamtasks.db.base import Base
from teamtasks.db.resource import EXPIRY_DAYS, DatabaseResource


class Authentication(Base, DatabaseResource):
    """A bearer token issued at login; its expiry slides on every refresh."""
    __tablename__ = "authentications"
    is_updatable = True
    is_creatable = True
    is_expirable = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    token = Column(String(255), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc) + timedelta(days=EXPIRY_DAYS))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
