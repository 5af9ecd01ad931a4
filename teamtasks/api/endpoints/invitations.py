"""
Invitations of the current user, each paired with its team.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import success
from teamtasks.core.errors import ApiError, InvitationError, TeamError
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import find_all, find_one, find_one_unarchived
from teamtasks.models.invitation import Invitation
from teamtasks.models.team import Team
from teamtasks.models.user import User
from teamtasks.schemas.invitation import InvitationOut
from teamtasks.schemas.response import ApiResponse
from teamtasks.schemas.team import InvitationWithTeam, TeamOut

router = APIRouter()


def _with_team(invitation: Invitation, team: Team) -> InvitationWithTeam:
    return InvitationWithTeam(
        invitation=InvitationOut.model_validate(invitation),
        team=TeamOut.model_validate(team),
    )


@router.get("/", response_model=ApiResponse[List[InvitationWithTeam]])
async def list_invitations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Invitations to teams that still exist"""
    pairs = []
    for invitation in await find_all(db, Invitation, [("user_id", current_user.id)]):
        try:
            team = await find_one_unarchived(db, Team, [("id", invitation.team_id)])
        except ResourceNotFoundError:
            continue
        pairs.append(_with_team(invitation, team))
    return success(pairs, "Invitations fetched successfully")


@router.get("/{invitation_id}", response_model=ApiResponse[InvitationWithTeam])
async def get_invitation(
    invitation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        invitation = await find_one(db, Invitation, [("id", invitation_id), ("user_id", current_user.id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, InvitationError.InvitationNotFound)
    try:
        team = await find_one_unarchived(db, Team, [("id", invitation.team_id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, TeamError.TeamNotFound)
    return success(_with_team(invitation, team), "Invitation fetched successfully")
