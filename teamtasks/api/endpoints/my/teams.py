"""
Teams API Endpoints for the current user

Team CRUD is reserved to the owner. Invitations and activities nested under
a team are checked against the caller's role in that team.
"""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db, require_permission, require_team_owner
from teamtasks.api.response import failure_as, success
from teamtasks.core.errors import ActivityError, ApiError, InvitationError, TeamError, UserError
from teamtasks.core.permissions import Action, Resource
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import (
    delete_resources,
    find_all,
    find_all_unarchived,
    find_one_unarchived,
    insert_resource,
    update_resource,
)
from teamtasks.logging import get_logger
from teamtasks.models.activity import Activity
from teamtasks.models.invitation import Invitation
from teamtasks.models.team import Team
from teamtasks.models.team_user import TeamUser
from teamtasks.models.user import User
from teamtasks.schemas.activity import ActivityAssign, ActivityCreate, ActivityOut, ActivityUpdate
from teamtasks.schemas.invitation import InvitationCreate, InvitationOut, InvitationWithUser
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.team import TeamCreate, TeamOut, TeamUpdate, TeamWithMembers
from teamtasks.schemas.user import UserOut
from teamtasks.services import activities as lifecycle
from teamtasks.services.teams import TeamContext, is_member, load_invitations_with_users, load_members

router = APIRouter()
logger = get_logger(__name__)


# ==================== Team CRUD ====================

@router.get("/teams", response_model=ApiResponse[List[TeamOut]])
async def list_owned_teams(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the teams the current user owns."""
    teams = await find_all_unarchived(db, Team, [("owner_id", current_user.id)])
    return success([TeamOut.model_validate(team) for team in teams], "Teams fetched successfully")


@router.post("/teams", response_model=ApiResponse[TeamOut], status_code=status.HTTP_201_CREATED)
async def create_team(
    team_in: TeamCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a team owned by the current user, who also becomes its first member."""
    with failure_as(TeamError.TeamCreationFailed, owner_id=current_user.id):
        team = await insert_resource(db, Team, [
            ("owner_id", current_user.id),
            ("name", team_in.name),
            ("description", team_in.description),
        ])
        await insert_resource(db, TeamUser, [("team_id", team.id), ("user_id", current_user.id)])

    logger.info("Team created", team_id=team.id, owner_id=current_user.id)
    return success(TeamOut.model_validate(team), "Team created successfully")


@router.get("/teams/{team_id}", response_model=ApiResponse[TeamWithMembers])
async def get_owned_team(
    team: Team = Depends(require_team_owner),
    db: AsyncSession = Depends(get_db)
):
    """Team with its members and invitations."""
    members = await load_members(db, team.id)
    invitations = await find_all(db, Invitation, [("team_id", team.id)])
    return success(
        TeamWithMembers(
            team=TeamOut.model_validate(team),
            members=[UserOut.model_validate(member) for member in members],
            invitations=await load_invitations_with_users(db, invitations),
        ),
        "Team fetched successfully",
    )


@router.put("/teams/{team_id}", response_model=ApiResponse[TeamOut])
async def update_team(
    team_in: TeamUpdate,
    team: Team = Depends(require_team_owner),
    db: AsyncSession = Depends(get_db)
):
    updates = list(team_in.model_dump(exclude_unset=True, exclude_none=True).items())
    with failure_as(TeamError.TeamUpdateFailed, team_id=team.id):
        team = await update_resource(db, Team, team.id, updates)
    return success(TeamOut.model_validate(team), "Team updated successfully")


@router.delete("/teams/{team_id}", response_model=ApiResponse[None])
async def delete_team(
    team: Team = Depends(require_team_owner),
    db: AsyncSession = Depends(get_db)
):
    """Archive the team."""
    with failure_as(TeamError.TeamDeletionFailed, team_id=team.id):
        await delete_resources(db, Team, [("id", team.id)])
    logger.info("Team archived", team_id=team.id)
    return success(None, "Team deleted successfully")


# ==================== Invitations ====================

@router.get("/teams/{team_id}/invitations", response_model=ApiResponse[List[InvitationWithUser]])
async def list_team_invitations(
    context: TeamContext = Depends(require_permission(Resource.INVITATION, Action.READ)),
    db: AsyncSession = Depends(get_db)
):
    invitations = await find_all(db, Invitation, [("team_id", context.team.id)])
    return success(await load_invitations_with_users(db, invitations), "Invitations fetched successfully")


@router.post(
    "/teams/{team_id}/invitations",
    response_model=ApiResponse[InvitationOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    invitation_in: InvitationCreate,
    context: TeamContext = Depends(require_permission(Resource.INVITATION, Action.CREATE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Invite a user to the team with a role.

    Raises:
        ApiError 404: If the invitee does not exist
        ApiError 400: If the invitee owns the team or already has an open invitation
    """
    try:
        invitee = await find_one_unarchived(db, User, [("id", invitation_in.user_id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, UserError.UserNotFound)

    if invitee.id == context.team.owner_id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, InvitationError.InvitationAlreadyExists)
    existing = await find_all(db, Invitation, [("team_id", context.team.id), ("user_id", invitee.id)])
    if any(not invitation.is_rejected for invitation in existing):
        raise ApiError(status.HTTP_400_BAD_REQUEST, InvitationError.InvitationAlreadyExists)

    with failure_as(InvitationError.InvitationCreationFailed, team_id=context.team.id):
        invitation = await insert_resource(db, Invitation, [
            ("user_id", invitee.id),
            ("team_id", context.team.id),
            ("team_role", invitation_in.team_role),
        ])

    logger.info("Invitation created", team_id=context.team.id, user_id=invitee.id)
    return success(InvitationOut.model_validate(invitation), "Invitation created successfully")


# ==================== Activities ====================

async def _find_team_activity(db: AsyncSession, team: Team, activity_id: str) -> Activity:
    try:
        return await find_one_unarchived(db, Activity, [("id", activity_id), ("team_id", team.id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, ActivityError.ActivityNotFound)


async def _apply(db: AsyncSession, activity: Activity, updates: lifecycle.Updates, message: str):
    with failure_as(ActivityError.ActivityUpdateFailed, activity_id=activity.id):
        activity = await update_resource(db, Activity, activity.id, updates)
    return success(ActivityOut.model_validate(activity), message)


@router.get("/teams/{team_id}/activities", response_model=ApiResponse[List[ActivityOut]])
async def list_team_activities(
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.READ)),
    db: AsyncSession = Depends(get_db)
):
    activities = await find_all_unarchived(db, Activity, [("team_id", context.team.id)])
    return success([ActivityOut.model_validate(activity) for activity in activities], "Activities fetched successfully")


@router.post(
    "/teams/{team_id}/activities",
    response_model=ApiResponse[ActivityOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_activity(
    activity_in: ActivityCreate,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.CREATE)),
    db: AsyncSession = Depends(get_db)
):
    with failure_as(ActivityError.ActivityCreationFailed, team_id=context.team.id):
        activity = await insert_resource(db, Activity, [
            ("team_id", context.team.id),
            ("name", activity_in.name),
            ("description", activity_in.description),
            ("duration_in_hours", activity_in.duration_in_hours),
        ])
    return success(ActivityOut.model_validate(activity), "Activity created successfully")


@router.get("/teams/{team_id}/activities/{activity_id}", response_model=ApiResponse[ActivityOut])
async def get_team_activity(
    activity_id: str,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.READ)),
    db: AsyncSession = Depends(get_db)
):
    activity = await _find_team_activity(db, context.team, activity_id)
    return success(ActivityOut.model_validate(activity), "Activity fetched successfully")


@router.put("/teams/{team_id}/activities/{activity_id}", response_model=ApiResponse[ActivityOut])
async def update_activity(
    activity_id: str,
    activity_in: ActivityUpdate,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.UPDATE)),
    db: AsyncSession = Depends(get_db)
):
    activity = await _find_team_activity(db, context.team, activity_id)
    updates = list(activity_in.model_dump(exclude_unset=True, exclude_none=True).items())
    return await _apply(db, activity, updates, "Activity updated successfully")


@router.delete("/teams/{team_id}/activities/{activity_id}", response_model=ApiResponse[None])
async def delete_activity(
    activity_id: str,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.DELETE)),
    db: AsyncSession = Depends(get_db)
):
    activity = await _find_team_activity(db, context.team, activity_id)
    with failure_as(ActivityError.ActivityDeletionFailed, activity_id=activity.id):
        await delete_resources(db, Activity, [("id", activity.id)])
    return success(None, "Activity deleted successfully")


@router.post("/teams/{team_id}/activities/{activity_id}/assign", response_model=ApiResponse[ActivityOut])
async def assign_activity(
    activity_id: str,
    payload: ActivityAssign,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.ASSIGN)),
    db: AsyncSession = Depends(get_db)
):
    """Assign the activity to the owner or a member of the team."""
    activity = await _find_team_activity(db, context.team, activity_id)
    if not await is_member(db, context.team, payload.user_id):
        raise ApiError(status.HTTP_400_BAD_REQUEST, ActivityError.AssigneeNotMember)
    updates = lifecycle.assign(activity, payload.user_id, datetime.now(timezone.utc))
    return await _apply(db, activity, updates, "Activity assigned successfully")


@router.post("/teams/{team_id}/activities/{activity_id}/unassign", response_model=ApiResponse[ActivityOut])
async def unassign_activity(
    activity_id: str,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.ASSIGN)),
    db: AsyncSession = Depends(get_db)
):
    activity = await _find_team_activity(db, context.team, activity_id)
    return await _apply(db, activity, lifecycle.unassign(activity), "Activity unassigned successfully")


@router.post(
    "/teams/{team_id}/activities/{activity_id}/{transition}",
    response_model=ApiResponse[ActivityOut],
)
async def transition_team_activity(
    activity_id: str,
    transition: lifecycle.Transition,
    context: TeamContext = Depends(require_permission(Resource.ACTIVITY, Action.UPDATE)),
    db: AsyncSession = Depends(get_db)
):
    """Pause, resume, complete or reopen an activity of the team."""
    activity = await _find_team_activity(db, context.team, activity_id)
    updates = lifecycle.apply_transition(activity, transition)
    return await _apply(db, activity, updates, f"Activity {transition.value} successful")
