from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import failure_as, success
from teamtasks.core.errors import BackupCodeError
from teamtasks.core.security import generate_backup_codes
from teamtasks.db.queries import delete_resources, find_all_unarchived, insert_resource
from teamtasks.models.backup_code import BackupCode
from teamtasks.models.user import User
from teamtasks.schemas.backup_code import BackupCodeOut
from teamtasks.schemas.response import ApiResponse

router = APIRouter()


@router.get("/backup-codes", response_model=ApiResponse[List[BackupCodeOut]])
async def list_backup_codes(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Unused backup codes of the current user"""
    codes = await find_all_unarchived(db, BackupCode, [("user_id", current_user.id)])
    return success([BackupCodeOut.model_validate(code) for code in codes], "Backup codes fetched successfully")


@router.post("/backup-codes/generate", response_model=ApiResponse[List[BackupCodeOut]])
async def regenerate_backup_codes(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Archive the remaining codes and issue a fresh batch"""
    with failure_as(BackupCodeError.CodeDeletionFailed, user_id=current_user.id):
        await delete_resources(db, BackupCode, [("user_id", current_user.id)])

    with failure_as(BackupCodeError.CodeCreationFailed, user_id=current_user.id):
        codes = []
        for code in await generate_backup_codes(db):
            codes.append(await insert_resource(db, BackupCode, [("code", code), ("user_id", current_user.id)]))

    return success([BackupCodeOut.model_validate(code) for code in codes], "Backup codes generated successfully")
