import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String

from teamtasks.core.permissions import TeamRole
from teamtasks.db.base import Base
from teamtasks.db.resource import DatabaseResource


class Invitation(Base, DatabaseResource):
    __tablename__ = "invitations"
    is_updatable = True
    is_creatable = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    team_id = Column(String(36), ForeignKey("teams.id"), index=True, nullable=False)
    team_role = Column(String(20), nullable=False, default=TeamRole.MEMBER.value)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_accepted(self) -> bool:
        return self.accepted_at is not None

    @property
    def is_rejected(self) -> bool:
        return self.rejected_at is not None

    @property
    def role(self) -> TeamRole:
        return TeamRole(self.team_role)
