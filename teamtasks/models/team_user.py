from sqlalchemy import Column, ForeignKey, String

from teamtasks.db.base import Base
from teamtasks.db.resource import DatabaseResource


class TeamUser(Base, DatabaseResource):
    """Team membership, written when an invitation is accepted"""
    __tablename__ = "team_users"
    has_id = False

    team_id = Column(String(36), ForeignKey("teams.id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
