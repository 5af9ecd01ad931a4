"""
Integration tests for team permissions (RBAC enforcement).

A member's role comes from the invitation they accepted; the owner may do
everything, including deleting the team.
"""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.core.permissions import TeamRole
from tests.factories import ActivityFactory, InvitationFactory, TeamUserFactory, UserFactory

pytestmark = pytest.mark.integration


async def add_member(db_session: AsyncSession, team, user, role: TeamRole):
    await InvitationFactory.create_async(
        db_session,
        team_id=team.id,
        user_id=user.id,
        team_role=role.value,
        accepted_at=datetime.now(timezone.utc),
    )
    await TeamUserFactory.create_async(db_session, team_id=team.id, user_id=user.id)


@pytest.mark.asyncio
class TestActivityPermissions:

    @pytest.mark.parametrize("role, expected", [
        (TeamRole.ADMIN, 201),
        (TeamRole.MANAGER, 201),
        (TeamRole.MEMBER, 403),
    ])
    async def test_create_activity_by_role(
        self, client: AsyncClient, db_session: AsyncSession, other_user, other_auth_headers, team, role, expected
    ):
        await add_member(db_session, team, other_user, role)

        response = await client.post(
            f"/api/my/teams/{team.id}/activities",
            headers=other_auth_headers,
            json={"name": "Write docs"}
        )

        assert response.status_code == expected

    async def test_forbidden_action_reports_it(
        self, client: AsyncClient, db_session: AsyncSession, other_user, other_auth_headers, team
    ):
        await add_member(db_session, team, other_user, TeamRole.MEMBER)

        response = await client.post(
            f"/api/my/teams/{team.id}/activities",
            headers=other_auth_headers,
            json={"name": "Write docs"}
        )

        body = response.json()
        assert body["error"] == {"TeamError": "TeamAccessDenied"}
        assert body["message"] == "Insufficient permissions: create on activity"

    @pytest.mark.parametrize("role, expected", [
        (TeamRole.ADMIN, 200),
        (TeamRole.MANAGER, 403),
    ])
    async def test_delete_activity_by_role(
        self, client: AsyncClient, db_session: AsyncSession, other_user, other_auth_headers, team, role, expected
    ):
        await add_member(db_session, team, other_user, role)
        activity = await ActivityFactory.create_async(db_session, team_id=team.id)

        response = await client.delete(
            f"/api/my/teams/{team.id}/activities/{activity.id}",
            headers=other_auth_headers
        )

        assert response.status_code == expected

    async def test_member_reads_activities(
        self, client: AsyncClient, db_session: AsyncSession, other_user, other_auth_headers, team
    ):
        await add_member(db_session, team, other_user, TeamRole.MEMBER)
        activity = await ActivityFactory.create_async(db_session, team_id=team.id)

        response = await client.get(f"/api/my/teams/{team.id}/activities", headers=other_auth_headers)

        assert response.status_code == 200
        assert [a["id"] for a in response.json()["data"]] == [activity.id]


@pytest.mark.asyncio
class TestInvitationPermissions:

    @pytest.mark.parametrize("role, expected", [
        (TeamRole.ADMIN, 201),
        (TeamRole.MANAGER, 403),
        (TeamRole.MEMBER, 403),
    ])
    async def test_invite_by_role(
        self, client: AsyncClient, db_session: AsyncSession, other_user, other_auth_headers, team, role, expected
    ):
        await add_member(db_session, team, other_user, role)
        invitee = await UserFactory.create_async(db_session)

        response = await client.post(
            f"/api/my/teams/{team.id}/invitations",
            headers=other_auth_headers,
            json={"user_id": invitee.id}
        )

        assert response.status_code == expected


@pytest.mark.asyncio
class TestOutsiders:

    async def test_outsider_is_denied(self, client: AsyncClient, other_auth_headers, team):
        response = await client.get(f"/api/my/teams/{team.id}/activities", headers=other_auth_headers)

        assert response.status_code == 403
        assert response.json()["error"] == {"TeamError": "TeamAccessDenied"}

    async def test_rejected_invitation_gives_no_access(
        self, client: AsyncClient, db_session: AsyncSession, other_user, other_auth_headers, team
    ):
        await InvitationFactory.create_async(
            db_session,
            team_id=team.id,
            user_id=other_user.id,
            team_role=TeamRole.ADMIN.value,
            rejected_at=datetime.now(timezone.utc),
        )

        response = await client.get(f"/api/my/teams/{team.id}/activities", headers=other_auth_headers)

        assert response.status_code == 403

    async def test_unknown_team(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/my/teams/00000000-0000-0000-0000-000000000000/activities",
            headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == {"TeamError": "TeamNotFound"}
