"""
Skills of the current user. Names are stored lower-cased and removal is
permanent.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import failure_as, success
from teamtasks.core.errors import ApiError, UserSkillError
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import delete_resources, find_all, find_one, insert_resource, update_resource
from teamtasks.models.user import User
from teamtasks.models.user_skill import UserSkill
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.user_skill import UserSkillCreate, UserSkillOut, UserSkillUpdate

router = APIRouter()


async def _find_own_skill(db: AsyncSession, skill_id: str, user: User) -> UserSkill:
    try:
        return await find_one(db, UserSkill, [("id", skill_id), ("user_id", user.id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, UserSkillError.UserSkillNotFound)


@router.get("/skills", response_model=ApiResponse[List[UserSkillOut]])
async def list_skills(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    skills = await find_all(db, UserSkill, [("user_id", current_user.id)])
    return success([UserSkillOut.model_validate(skill) for skill in skills], "Skills fetched successfully")


@router.post("/skills", response_model=ApiResponse[UserSkillOut], status_code=status.HTTP_201_CREATED)
async def create_skill(
    skill_in: UserSkillCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    with failure_as(UserSkillError.UserSkillCreationFailed, user_id=current_user.id):
        skill = await insert_resource(db, UserSkill, [
            ("user_id", current_user.id),
            ("skill_name", skill_in.skill_name),
            ("skill_level", skill_in.skill_level),
        ])
    return success(UserSkillOut.model_validate(skill), "Skill created successfully")


@router.put("/skills/{skill_id}", response_model=ApiResponse[UserSkillOut])
async def update_skill(
    skill_id: str,
    skill_in: UserSkillUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    skill = await _find_own_skill(db, skill_id, current_user)
    updates = list(skill_in.model_dump(exclude_unset=True, exclude_none=True).items())
    with failure_as(UserSkillError.UserSkillUpdateFailed, skill_id=skill.id):
        skill = await update_resource(db, UserSkill, skill.id, updates)
    return success(UserSkillOut.model_validate(skill), "Skill updated successfully")


@router.delete("/skills/{skill_id}", response_model=ApiResponse[None])
async def delete_skill(
    skill_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    skill = await _find_own_skill(db, skill_id, current_user)
    with failure_as(UserSkillError.UserSkillDeletionFailed, skill_id=skill.id):
        await delete_resources(db, UserSkill, [("id", skill.id)])
    return success(None, "Skill deleted successfully")
