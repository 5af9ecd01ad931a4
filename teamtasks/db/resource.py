"""
Contract shared by every persisted entity.

A resource is a SQLAlchemy model whose table name is derived from its class
name and whose flags tell the query layer which bookkeeping columns to
maintain:

    has_id         server-generated UUID primary key
    is_archivable  soft delete through archived_at
    is_updatable   updated_at refreshed on every write
    is_creatable   created_at stamped on insert
    is_expirable   expires_at = now + EXPIRY_DAYS on insert and update
"""

from typing import Any, Mapping, Type, TypeVar

from teamtasks.db.exceptions import ResourceDecodeError
from teamtasks.helpers.strings import camel_to_snake_case, pluralize

EXPIRY_DAYS = 30

R = TypeVar("R", bound="DatabaseResource")


def resource_table_name(class_name: str) -> str:
    return pluralize(camel_to_snake_case(class_name))


class DatabaseResource:
    has_id: bool = True
    is_archivable: bool = False
    is_updatable: bool = False
    is_creatable: bool = False
    is_expirable: bool = False

    @classmethod
    def resource_name(cls) -> str:
        return getattr(cls, "__tablename__", None) or resource_table_name(cls.__name__)

    @classmethod
    def column_names(cls):
        return [column.name for column in cls.__table__.columns]

    @classmethod
    def from_row(cls: Type[R], row: Mapping[str, Any]) -> R:
        """
        Build the entity from a result row mapping.

        Raises:
            ResourceDecodeError: If a column of the resource is missing from the row
        """
        values = {}
        for column in cls.__table__.columns:
            if column.name not in row:
                raise ResourceDecodeError(
                    f"Column '{column.name}' missing from {cls.resource_name()} row"
                )
            values[column.key] = row[column.name]
        return cls(**values)
