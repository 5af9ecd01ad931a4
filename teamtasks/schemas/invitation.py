"""
Pydantic schemas for team invitations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from teamtasks.core.permissions import TeamRole
from teamtasks.schemas.user import UserOut


class InvitationCreate(BaseModel):
    user_id: str
    team_role: TeamRole = TeamRole.MEMBER


class InvitationOut(BaseModel):
    id: str
    user_id: str
    team_id: str
    team_role: TeamRole
    created_at: datetime
    updated_at: datetime
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    is_accepted: bool
    is_rejected: bool

    class Config:
        from_attributes = True


class InvitationWithUser(BaseModel):
    invitation: InvitationOut
    user: UserOut
