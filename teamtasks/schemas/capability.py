from pydantic import BaseModel

from teamtasks.schemas.user import UserOut


class Capability(BaseModel):
    """A member's level in a skill and whether they are free to take work"""
    user: UserOut
    skill: str
    level: int
    available: bool
