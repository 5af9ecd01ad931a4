"""
Current user profile endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import failure_as, success
from teamtasks.core.errors import ApiError, AuthenticationError, UserError
from teamtasks.core.security import get_password_hash, verify_password
from teamtasks.db.queries import update_resource
from teamtasks.models.user import User
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.user import PasswordChange, UserOut, UserUpdate

router = APIRouter()


@router.get("/user", response_model=ApiResponse[UserOut])
async def read_me(current_user: User = Depends(get_current_user)):
    return success(UserOut.model_validate(current_user), "User fetched successfully")


@router.put("/user", response_model=ApiResponse[UserOut])
async def update_me(
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updates = list(user_in.model_dump(exclude_unset=True, exclude_none=True).items())
    with failure_as(UserError.UserUpdateFailed, user_id=current_user.id):
        user = await update_resource(db, User, current_user.id, updates)
    return success(UserOut.model_validate(user), "User updated successfully")


@router.post("/user/change-password", response_model=ApiResponse[UserOut])
async def change_password(
    payload: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(payload.old_password, current_user.password_hash):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, AuthenticationError.InvalidCredentials)

    with failure_as(UserError.UserUpdateFailed, user_id=current_user.id):
        user = await update_resource(
            db, User, current_user.id, [("password_hash", get_password_hash(payload.new_password))]
        )
    return success(UserOut.model_validate(user), "Password changed successfully")
