"""
Teams API Endpoints

Read views of teams shared by the owner and every member.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db, get_team_member_context, require_permission
from teamtasks.api.response import success
from teamtasks.core.permissions import Action, Resource
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import find_all, find_all_unarchived, find_one_unarchived
from teamtasks.models.invitation import Invitation
from teamtasks.models.team import Team
from teamtasks.models.user import User
from teamtasks.schemas.invitation import InvitationWithUser
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.team import TeamOut, TeamOverview
from teamtasks.services.capabilities import load_capabilities
from teamtasks.services.teams import TeamContext, load_invitations_with_users

router = APIRouter()


@router.get("/", response_model=ApiResponse[List[TeamOut]])
async def list_teams(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Teams the current user owns, then teams joined through an accepted invitation."""
    teams = await find_all_unarchived(db, Team, [("owner_id", current_user.id)])
    seen = {team.id for team in teams}

    for invitation in await find_all(db, Invitation, [("user_id", current_user.id)]):
        if not invitation.is_accepted or invitation.team_id in seen:
            continue
        try:
            team = await find_one_unarchived(db, Team, [("id", invitation.team_id)])
        except ResourceNotFoundError:
            continue
        seen.add(team.id)
        teams.append(team)

    return success([TeamOut.model_validate(team) for team in teams], "Teams fetched successfully")


@router.get("/{team_id}", response_model=ApiResponse[TeamOverview])
async def get_team(
    context: TeamContext = Depends(get_team_member_context),
    db: AsyncSession = Depends(get_db)
):
    """Team with its invitations and the capabilities of its members."""
    invitations = await find_all(db, Invitation, [("team_id", context.team.id)])
    return success(
        TeamOverview(
            team=TeamOut.model_validate(context.team),
            invitations=await load_invitations_with_users(db, invitations),
            capabilities=await load_capabilities(db, context.team),
        ),
        "Team fetched successfully",
    )


@router.get("/{team_id}/invitations", response_model=ApiResponse[List[InvitationWithUser]])
async def list_team_invitations(
    context: TeamContext = Depends(require_permission(Resource.INVITATION, Action.READ)),
    db: AsyncSession = Depends(get_db)
):
    invitations = await find_all(db, Invitation, [("team_id", context.team.id)])
    return success(await load_invitations_with_users(db, invitations), "Invitations fetched successfully")
