import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String

from teamtasks.db.base import Base
from teamtasks.db.resource import DatabaseResource


class BackupCode(Base, DatabaseResource):
    """Single-use recovery code; archived once consumed"""
    __tablename__ = "backup_codes"
    is_archivable = True
    is_updatable = True
    is_creatable = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code = Column(String(32), unique=True, index=True, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    archived_at = Column(DateTime(timezone=True), nullable=True)
