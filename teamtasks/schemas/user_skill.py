from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class UserSkillCreate(BaseModel):
    skill_name: str = Field(..., min_length=1, max_length=100)
    skill_level: int = Field(1, ge=0, le=10)

    @field_validator("skill_name")
    @classmethod
    def lower_case_name(cls, value: str) -> str:
        return value.strip().lower()


class UserSkillUpdate(BaseModel):
    skill_name: Optional[str] = Field(None, min_length=1, max_length=100)
    skill_level: Optional[int] = Field(None, ge=0, le=10)

    @field_validator("skill_name")
    @classmethod
    def lower_case_name(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value is not None else value


class UserSkillOut(BaseModel):
    id: str
    user_id: str
    skill_name: str
    skill_level: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
