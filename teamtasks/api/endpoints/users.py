from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import success
from teamtasks.db.queries import find_all_unarchived
from teamtasks.models.user import User
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.user import UserOut

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[UserOut]])
async def list_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Every active user, e.g. to pick an invitee"""
    users = await find_all_unarchived(db, User)
    return success([UserOut.model_validate(user) for user in users], "Users fetched successfully")
