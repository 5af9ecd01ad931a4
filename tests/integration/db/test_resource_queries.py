"""
Integration tests for the generic query executors against PostgreSQL.

Tests:
- insert / find / update round trips through the resource contract
- archive, restore and hard delete
- join of users through team memberships
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.db.exceptions import DatabaseError, ResourceNotFoundError
from teamtasks.db.queries import (
    delete_resources,
    find_all,
    find_all_archived,
    find_all_unarchived,
    find_one,
    find_one_archived,
    find_one_unarchived,
    insert_resource,
    join_all,
    restore_resource,
    update_resource,
)
from teamtasks.db.values import DatabaseValue
from teamtasks.models.activity import Activity
from teamtasks.models.team_user import TeamUser
from teamtasks.models.user import User
from teamtasks.models.user_skill import UserSkill
from tests.factories import TeamFactory, TeamUserFactory, UserFactory

pytestmark = pytest.mark.integration


async def _insert_user(db: AsyncSession, username: str) -> User:
    return await insert_resource(db, User, [
        ("first_name", "Ada"),
        ("last_name", "Lovelace"),
        ("username", username),
        ("password_hash", "hash"),
    ])


@pytest.mark.asyncio
class TestInsertAndFind:

    async def test_insert_stamps_bookkeeping_columns(self, db_session: AsyncSession):
        user = await _insert_user(db_session, "ada")

        assert len(user.id) == 36
        assert user.created_at is not None
        assert user.updated_at is not None
        assert user.archived_at is None

    async def test_find_one_by_filters(self, db_session: AsyncSession):
        user = await _insert_user(db_session, "ada")

        found = await find_one(db_session, User, [("username", "ada")])

        assert found.id == user.id

    async def test_find_one_missing(self, db_session: AsyncSession):
        with pytest.raises(ResourceNotFoundError):
            await find_one(db_session, User, [("username", "nobody")])

    async def test_find_all_keeps_creation_order(self, db_session: AsyncSession):
        first = await _insert_user(db_session, "first")
        second = await _insert_user(db_session, "second")

        users = await find_all(db_session, User, [("last_name", "Lovelace")])

        assert [user.id for user in users] == [first.id, second.id]

    async def test_null_filter(self, db_session: AsyncSession, user):
        team = await TeamFactory.create_async(db_session, owner_id=user.id)
        open_activity = await insert_resource(db_session, Activity, [("team_id", team.id), ("name", "open")])
        await insert_resource(db_session, Activity, [
            ("team_id", team.id),
            ("name", "taken"),
            ("assigned_to", user.id),
        ])

        unassigned = await find_all(db_session, Activity, [("team_id", team.id), ("assigned_to", None)])

        assert [activity.id for activity in unassigned] == [open_activity.id]

    async def test_duplicate_username_raises_database_error(self, db_session: AsyncSession):
        await _insert_user(db_session, "ada")

        with pytest.raises(DatabaseError):
            await _insert_user(db_session, "ada")


@pytest.mark.asyncio
class TestUpdate:

    async def test_update_returns_fresh_row(self, db_session: AsyncSession):
        user = await _insert_user(db_session, "ada")

        updated = await update_resource(db_session, User, user.id, [("first_name", "Augusta")])

        assert updated.first_name == "Augusta"
        assert updated.updated_at >= user.updated_at

    async def test_update_can_clear_column(self, db_session: AsyncSession, user):
        team = await TeamFactory.create_async(db_session, owner_id=user.id)
        activity = await insert_resource(db_session, Activity, [
            ("team_id", team.id),
            ("name", "paused"),
            ("paused_at", DatabaseValue.timestamp(datetime.now(timezone.utc))),
        ])

        updated = await update_resource(db_session, Activity, activity.id, [("paused_at", DatabaseValue.none())])

        assert updated.paused_at is None

    async def test_update_unknown_id(self, db_session: AsyncSession):
        with pytest.raises(ResourceNotFoundError):
            await update_resource(db_session, User, "00000000-0000-0000-0000-000000000000", [("first_name", "x")])


@pytest.mark.asyncio
class TestArchive:

    async def test_delete_archives(self, db_session: AsyncSession):
        user = await _insert_user(db_session, "ada")

        assert await delete_resources(db_session, User, [("id", user.id)]) == 1

        assert (await find_one_archived(db_session, User, [("id", user.id)])).archived_at is not None
        with pytest.raises(ResourceNotFoundError):
            await find_one_unarchived(db_session, User, [("id", user.id)])

    async def test_archiving_twice_touches_nothing(self, db_session: AsyncSession):
        user = await _insert_user(db_session, "ada")
        await delete_resources(db_session, User, [("id", user.id)])

        assert await delete_resources(db_session, User, [("id", user.id)]) == 0

    async def test_restore(self, db_session: AsyncSession):
        user = await _insert_user(db_session, "ada")
        await delete_resources(db_session, User, [("id", user.id)])

        restored = await restore_resource(db_session, User, user.id)

        assert restored.archived_at is None
        assert [u.id for u in await find_all_unarchived(db_session, User, [("id", user.id)])] == [user.id]
        assert await find_all_archived(db_session, User, [("id", user.id)]) == []

    async def test_non_archivable_rows_are_removed(self, db_session: AsyncSession, user):
        skill = await insert_resource(db_session, UserSkill, [
            ("user_id", user.id),
            ("skill_name", "python"),
            ("skill_level", 3),
        ])

        await delete_resources(db_session, UserSkill, [("id", skill.id)])

        assert await find_all(db_session, UserSkill, [("user_id", user.id)]) == []


@pytest.mark.asyncio
class TestJoin:

    async def test_members_through_team_users(self, db_session: AsyncSession, user, other_user):
        outsider = await UserFactory.create_async(db_session)
        team = await TeamFactory.create_with_owner_async(db_session, owner_id=user.id)
        await TeamUserFactory.create_async(db_session, team_id=team.id, user_id=other_user.id)

        members = await join_all(db_session, User, TeamUser, [("team_users.team_id", team.id)])

        assert {member.id for member in members} == {user.id, other_user.id}
        assert outsider.id not in {member.id for member in members}

    async def test_archived_members_are_skipped(self, db_session: AsyncSession, user, other_user):
        team = await TeamFactory.create_with_owner_async(db_session, owner_id=user.id)
        await TeamUserFactory.create_async(db_session, team_id=team.id, user_id=other_user.id)
        await delete_resources(db_session, User, [("id", other_user.id)])

        members = await join_all(db_session, User, TeamUser, [("team_users.team_id", team.id)])

        assert [member.id for member in members] == [user.id]
