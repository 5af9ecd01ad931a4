from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from teamtasks.schemas.user import UserOut


class LoginRequest(BaseModel):
    username: str
    password: str


class RecoverRequest(BaseModel):
    """Sign in with a single-use backup code"""
    username: str
    code: str = Field(..., min_length=1, max_length=32)


class AuthenticationOut(BaseModel):
    id: str
    user_id: str
    token: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RegistrationOut(BaseModel):
    """The new (or restored) user and their fresh backup codes"""
    user: UserOut
    backup_codes: List[str]
