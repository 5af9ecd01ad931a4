import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from teamtasks.db.base import Base
from teamtasks.db.resource import DatabaseResource


class User(Base, DatabaseResource):
    __tablename__ = "users"
    is_archivable = True
    is_updatable = True
    is_creatable = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    archived_at = Column(DateTime(timezone=True), nullable=True)
