"""
Activities assigned to the current user.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import failure_as, success
from teamtasks.core.errors import ActivityError, ApiError
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import find_all_unarchived, find_one_unarchived, update_resource
from teamtasks.models.activity import Activity
from teamtasks.models.user import User
from teamtasks.schemas.activity import ActivityOut
from teamtasks.schemas.response import ApiResponse
from teamtasks.services.activities import Transition, apply_transition

router = APIRouter()


@router.get("/activities", response_model=ApiResponse[List[ActivityOut]])
async def list_my_activities(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    activities = await find_all_unarchived(db, Activity, [("assigned_to", current_user.id)])
    return success([ActivityOut.model_validate(activity) for activity in activities], "Activities fetched successfully")


@router.get("/activities/{activity_id}", response_model=ApiResponse[ActivityOut])
async def get_my_activity(
    activity_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        activity = await find_one_unarchived(
            db, Activity, [("id", activity_id), ("assigned_to", current_user.id)]
        )
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, ActivityError.ActivityNotFound)
    return success(ActivityOut.model_validate(activity), "Activity fetched successfully")


@router.post("/activities/{activity_id}/{transition}", response_model=ApiResponse[ActivityOut])
async def transition_my_activity(
    activity_id: str,
    transition: Transition,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Complete, reopen, pause or resume an activity.

    Raises:
        ApiError 404: If the activity does not exist
        ApiError 403: If it is assigned to someone else
        ApiError 400: If the transition is not allowed from its current state
    """
    try:
        activity = await find_one_unarchived(db, Activity, [("id", activity_id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, ActivityError.ActivityNotFound)
    if activity.assigned_to != current_user.id:
        raise ApiError(status.HTTP_403_FORBIDDEN, ActivityError.ActivityAccessDenied)

    updates = apply_transition(activity, transition)
    with failure_as(ActivityError.ActivityUpdateFailed, activity_id=activity.id):
        activity = await update_resource(db, Activity, activity.id, updates)
    return success(ActivityOut.model_validate(activity), f"Activity {transition.value} successful")
