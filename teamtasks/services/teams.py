"""
Team membership lookups shared by the team, invitation and activity routes.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.core.permissions import Action, Resource, TeamRole, has_permission
from teamtasks.db.exceptions import ResourceNotFoundError
from teamtasks.db.queries import find_all, find_one, find_one_unarchived, join_all
from teamtasks.models.invitation import Invitation
from teamtasks.models.team import Team
from teamtasks.models.team_user import TeamUser
from teamtasks.models.user import User
from teamtasks.schemas.invitation import InvitationOut, InvitationWithUser
from teamtasks.schemas.user import UserOut


@dataclass
class TeamContext:
    """The caller's standing in a team"""
    team: Team
    user: User
    role: TeamRole
    is_owner: bool

    def can(self, resource: Resource, action: Action) -> bool:
        return has_permission(self.role, resource, action, self.is_owner)


async def find_accepted_invitation(db: AsyncSession, team_id: str, user_id: str) -> Optional[Invitation]:
    invitations = await find_all(db, Invitation, [("team_id", team_id), ("user_id", user_id)])
    for invitation in invitations:
        if invitation.is_accepted and not invitation.is_rejected:
            return invitation
    return None


async def get_team_context(db: AsyncSession, team_id: str, user: User) -> Optional[TeamContext]:
    """
    Owner or accepted invitee context; None when the caller has no standing.

    Raises:
        ResourceNotFoundError: If the team does not exist or is archived
    """
    team = await find_one_unarchived(db, Team, [("id", team_id)])
    if team.owner_id == user.id:
        return TeamContext(team=team, user=user, role=TeamRole.ADMIN, is_owner=True)

    invitation = await find_accepted_invitation(db, team_id, user.id)
    if invitation is None:
        return None
    return TeamContext(team=team, user=user, role=invitation.role, is_owner=False)


async def load_members(db: AsyncSession, team_id: str) -> List[User]:
    return await join_all(db, User, TeamUser, [("team_users.team_id", team_id)])


async def is_member(db: AsyncSession, team: Team, user_id: str) -> bool:
    if team.owner_id == user_id:
        return True
    try:
        await find_one(db, TeamUser, [("team_id", team.id), ("user_id", user_id)])
    except ResourceNotFoundError:
        return False
    return True


async def load_invitations_with_users(db: AsyncSession, invitations: List[Invitation]) -> List[InvitationWithUser]:
    """Pairs each invitation with its (unarchived) invitee; archived invitees are left out."""
    pairs = []
    for invitation in invitations:
        try:
            user = await find_one_unarchived(db, User, [("id", invitation.user_id)])
        except ResourceNotFoundError:
            continue
        pairs.append(InvitationWithUser(
            invitation=InvitationOut.model_validate(invitation),
            user=UserOut.model_validate(user),
        ))
    return pairs
