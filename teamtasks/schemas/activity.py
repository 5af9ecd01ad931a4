"""
Pydantic schemas for Activity entities.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from teamtasks.db.values import INT32_MAX


class ActivityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    duration_in_hours: Optional[int] = Field(None, ge=0, le=INT32_MAX)


class ActivityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    duration_in_hours: Optional[int] = Field(None, ge=0, le=INT32_MAX)


class ActivityAssign(BaseModel):
    user_id: str


class ActivityOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    team_id: str
    duration_in_hours: Optional[int] = None
    started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
