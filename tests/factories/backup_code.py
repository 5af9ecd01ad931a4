import factory

from teamtasks.core.security import generate_code
from teamtasks.models.backup_code import BackupCode
from tests.factories.base import AsyncFactory


class BackupCodeFactory(AsyncFactory):
    class Meta:
        model = BackupCode

    _required = ("user_id",)

    user_id = None
    code = factory.LazyFunction(generate_code)
    archived_at = None
