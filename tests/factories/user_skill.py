import factory

from teamtasks.models.user_skill import UserSkill
from tests.factories.base import AsyncFactory


class UserSkillFactory(AsyncFactory):
    class Meta:
        model = UserSkill

    _required = ("user_id",)

    user_id = None
    skill_name = factory.Iterator(["python", "design", "sql", "devops"])
    skill_level = factory.Faker("pyint", min_value=1, max_value=10)
