import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from teamtasks.db.base import Base
from teamtasks.db.resource import DatabaseResource


class Activity(Base, DatabaseResource):
    """A task of a team; its lifecycle state is derived from the timestamps"""
    __tablename__ = "activities"
    is_archivable = True
    is_updatable = True
    is_creatable = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    assigned_to = Column(String(36), ForeignKey("users.id"), index=True, nullable=True)
    team_id = Column(String(36), ForeignKey("teams.id"), index=True, nullable=False)
    duration_in_hours = Column(Integer, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    paused_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    archived_at = Column(DateTime(timezone=True), nullable=True)
