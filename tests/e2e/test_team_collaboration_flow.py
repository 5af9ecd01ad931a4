"""
End-to-end test for team collaboration flow with multiple users.

Tests complete multi-user team workflows.
"""

import pytest
from httpx import AsyncClient

from tests.factories import DEFAULT_PASSWORD, UserFactory


async def sign_in(client: AsyncClient, username: str) -> dict:
    response = await client.post("/api/auth/", json={"username": username, "password": DEFAULT_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.mark.e2e
@pytest.mark.asyncio
class TestTeamCollaborationFlow:
    """Complete team collaboration flow between an owner and a manager."""

    async def test_complete_team_collaboration_flow(self, client: AsyncClient, db_session):
        """
        1. Owner creates a team
        2. Owner invites a user as manager
        3. Invitee accepts and sees the team
        4. Manager plans an activity and assigns it to themself
        5. Manager pauses, resumes and completes it from their own list
        6. Manager cannot delete the activity or the team
        7. Owner deletes the team; it disappears for both
        """
        owner = await UserFactory.create_async(db_session)
        manager = await UserFactory.create_async(db_session)
        owner_headers = await sign_in(client, owner.username)
        manager_headers = await sign_in(client, manager.username)

        # Step 1: Owner creates a team
        created = await client.post("/api/my/teams", headers=owner_headers, json={"name": "Launch"})
        assert created.status_code == 201
        team_id = created.json()["data"]["id"]

        # Step 2: Invite as manager
        invited = await client.post(
            f"/api/my/teams/{team_id}/invitations",
            headers=owner_headers,
            json={"user_id": manager.id, "team_role": "manager"},
        )
        assert invited.status_code == 201
        invitation_id = invited.json()["data"]["id"]

        # Step 3: Accept
        pending = await client.get("/api/invitations/", headers=manager_headers)
        assert pending.json()["data"][0]["team"]["id"] == team_id

        accepted = await client.post(f"/api/my/invitations/{invitation_id}/accept", headers=manager_headers)
        assert accepted.status_code == 200

        teams = await client.get("/api/teams/", headers=manager_headers)
        assert [t["id"] for t in teams.json()["data"]] == [team_id]

        # Step 4: Plan and assign
        activity = await client.post(
            f"/api/my/teams/{team_id}/activities",
            headers=manager_headers,
            json={"name": "Write release notes", "duration_in_hours": 2},
        )
        assert activity.status_code == 201
        activity_id = activity.json()["data"]["id"]

        assigned = await client.post(
            f"/api/my/teams/{team_id}/activities/{activity_id}/assign",
            headers=manager_headers,
            json={"user_id": manager.id},
        )
        assert assigned.status_code == 200

        overview = await client.get(f"/api/teams/{team_id}", headers=owner_headers)
        assert overview.status_code == 200

        # Step 5: Work through it
        mine = await client.get("/api/my/activities", headers=manager_headers)
        assert [a["id"] for a in mine.json()["data"]] == [activity_id]

        for transition in ("pause", "resume", "complete"):
            response = await client.post(f"/api/my/activities/{activity_id}/{transition}", headers=manager_headers)
            assert response.status_code == 200

        assert response.json()["data"]["completed_at"] is not None

        # Step 6: Limits of the manager role
        delete_activity = await client.delete(
            f"/api/my/teams/{team_id}/activities/{activity_id}", headers=manager_headers
        )
        assert delete_activity.status_code == 403

        delete_team = await client.delete(f"/api/my/teams/{team_id}", headers=manager_headers)
        assert delete_team.status_code == 404

        # Step 7: Owner deletes the team
        assert (await client.delete(f"/api/my/teams/{team_id}", headers=owner_headers)).status_code == 200

        assert (await client.get("/api/teams/", headers=manager_headers)).json()["data"] == []
        assert (await client.get(f"/api/teams/{team_id}", headers=owner_headers)).status_code == 404
