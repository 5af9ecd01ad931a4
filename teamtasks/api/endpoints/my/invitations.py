"""
Invitations addressed to the current user.

Accepting adds the user to the team and clears an earlier rejection;
rejecting removes the membership and clears an earlier acceptance.
"""
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.api.dependencies import get_current_user, get_db
from teamtasks.api.response import failure_as, success
from teamtasks.core.errors import ApiError, InvitationError, TeamError
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import (
    delete_resources,
    find_all,
    find_one,
    find_one_unarchived,
    insert_resource,
    update_resource,
)
from teamtasks.db.values import DatabaseValue
from teamtasks.logging import get_logger
from teamtasks.models.invitation import Invitation
from teamtasks.models.team import Team
from teamtasks.models.team_user import TeamUser
from teamtasks.models.user import User
from teamtasks.schemas.invitation import InvitationOut
from teamtasks.schemas.response import ApiResponse

router = APIRouter()
logger = get_logger(__name__)


async def _find_own_invitation(db: AsyncSession, invitation_id: str, user: User) -> Invitation:
    try:
        return await find_one(db, Invitation, [("id", invitation_id), ("user_id", user.id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, InvitationError.InvitationNotFound)


@router.get("/invitations", response_model=ApiResponse[List[InvitationOut]])
async def list_my_invitations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    invitations = await find_all(db, Invitation, [("user_id", current_user.id)])
    return success([InvitationOut.model_validate(invitation) for invitation in invitations], "Invitations fetched successfully")


@router.get("/invitations/{invitation_id}", response_model=ApiResponse[InvitationOut])
async def get_my_invitation(
    invitation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    invitation = await _find_own_invitation(db, invitation_id, current_user)
    return success(InvitationOut.model_validate(invitation), "Invitation fetched successfully")


@router.post("/invitations/{invitation_id}/accept", response_model=ApiResponse[InvitationOut])
async def accept_invitation(
    invitation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    invitation = await _find_own_invitation(db, invitation_id, current_user)
    try:
        await find_one_unarchived(db, Team, [("id", invitation.team_id)])
    except ResourceNotFoundError:
        raise ApiError(status.HTTP_404_NOT_FOUND, TeamError.TeamNotFound)

    with failure_as(InvitationError.InvitationUpdateFailed, invitation_id=invitation.id):
        invitation = await update_resource(db, Invitation, invitation.id, [
            ("accepted_at", DatabaseValue.timestamp(datetime.now(timezone.utc))),
            ("rejected_at", DatabaseValue.none()),
        ])

    membership = [("team_id", invitation.team_id), ("user_id", current_user.id)]
    with failure_as(TeamError.TeamUserCreationFailed, team_id=invitation.team_id):
        if not await find_all(db, TeamUser, membership):
            await insert_resource(db, TeamUser, membership)

    logger.info("Invitation accepted", invitation_id=invitation.id, team_id=invitation.team_id)
    return success(InvitationOut.model_validate(invitation), "Invitation accepted successfully")


@router.post("/invitations/{invitation_id}/reject", response_model=ApiResponse[InvitationOut])
async def reject_invitation(
    invitation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    invitation = await _find_own_invitation(db, invitation_id, current_user)

    with failure_as(InvitationError.InvitationUpdateFailed, invitation_id=invitation.id):
        invitation = await update_resource(db, Invitation, invitation.id, [
            ("rejected_at", DatabaseValue.timestamp(datetime.now(timezone.utc))),
            ("accepted_at", DatabaseValue.none()),
        ])

    with failure_as(TeamError.TeamUserDeletionFailed, team_id=invitation.team_id):
        await delete_resources(db, TeamUser, [("team_id", invitation.team_id), ("user_id", current_user.id)])

    logger.info("Invitation rejected", invitation_id=invitation.id, team_id=invitation.team_id)
    return success(InvitationOut.model_validate(invitation), "Invitation rejected successfully")
