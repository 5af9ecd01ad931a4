"""
Pydantic schemas for Team entities.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from teamtasks.schemas.capability import Capability
from teamtasks.schemas.invitation import InvitationOut, InvitationWithUser
from teamtasks.schemas.user import UserOut


class TeamBase(BaseModel):
    """Base schema for team with common fields"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class TeamCreate(TeamBase):
    """Schema for creating a new team"""
    pass


class TeamUpdate(BaseModel):
    """Schema for updating a team"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class TeamOut(TeamBase):
    """Schema for team output"""
    id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeamWithMembers(BaseModel):
    """Owner's view of a team"""
    team: TeamOut
    members: List[UserOut]
    invitations: List[InvitationWithUser]


class TeamOverview(BaseModel):
    """Shared view of a team, with capabilities keyed by skill name"""
    team: TeamOut
    invitations: List[InvitationWithUser]
    capabilities: Dict[str, List[Capability]]


class InvitationWithTeam(BaseModel):
    invitation: InvitationOut
    team: TeamOut
