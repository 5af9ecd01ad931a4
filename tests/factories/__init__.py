"""
Data factories for test data generation.

Factories use factory-boy to create realistic test data with sensible defaults.
All factories support async creation via create_async().

Usage:
    from tests.factories import UserFactory, TeamFactory

    user = await UserFactory.create_async(db_session, username="alice")
    team = await TeamFactory.create_with_owner_async(db_session, owner_id=user.id)
"""

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.factories.authentication import AuthenticationFactory
from tests.factories.team import TeamFactory, TeamUserFactory
from tests.factories.invitation import InvitationFactory
from tests.factories.activity import ActivityFactory
from tests.factories.user_skill import UserSkillFactory
from tests.factories.backup_code import BackupCodeFactory

__all__ = [
    "DEFAULT_PASSWORD",
    "UserFactory",
    "AuthenticationFactory",
    "TeamFactory",
    "TeamUserFactory",
    "InvitationFactory",
    "ActivityFactory",
    "UserSkillFactory",
    "BackupCodeFactory",
]
