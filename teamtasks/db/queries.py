"""
Generic resource persistence.

Every operation comes in two halves: a pure ``build_*`` function that
renders a parameterized Statement, and an async executor that runs it on an
AsyncSession and maps the rows back through the resource contract.

Filters are ordered ``(column, value)`` pairs joined with AND and bound as
``:p1, :p2, ...`` in order. Values are wrapped with DatabaseValue.of unless
they already are DatabaseValues.

Usage:
    user = await find_one_unarchived(db, User, [("username", "alice")])
    team = await insert_resource(db, Team, [("name", "Core"), ("owner_id", user.id)])
    await delete_resources(db, Team, [("id", team.id)])
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from teamtasks.db.exceptions import DatabaseError, ResourceNotFoundError
from teamtasks.db.resource import EXPIRY_DAYS, DatabaseResource
from teamtasks.db.values import DatabaseValue
from teamtasks.helpers.strings import singularize
from teamtasks.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R", bound=DatabaseResource)
Filters = Sequence[Tuple[str, Any]]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_ORDERING = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?(\s+(ASC|DESC))?$",
    re.IGNORECASE,
)


class ArchiveScope(str, Enum):
    ANY = "any"
    UNARCHIVED = "unarchived"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Statement:
    sql: str
    params: Dict[str, Any] = field(default_factory=dict)


# Validation helpers

def _check_identifier(column: str) -> str:
    if not isinstance(column, str) or not _IDENTIFIER.match(column):
        raise ValueError(f"Invalid column name: {column!r}")
    return column


def _check_ordering(order_by: str) -> str:
    for part in order_by.split(","):
        if not _ORDERING.match(part.strip()):
            raise ValueError(f"Invalid ordering: {order_by!r}")
    return order_by


def _check_scope(resource: Type[DatabaseResource], scope: ArchiveScope) -> None:
    if scope != ArchiveScope.ANY and not resource.is_archivable:
        raise ValueError(f"{resource.resource_name()} is not archivable")


def _qualify(table: Optional[str], column: str) -> str:
    return f"{table}.{column}" if table else column


def _where(
    filters: Filters,
    scope: ArchiveScope = ArchiveScope.ANY,
    table: Optional[str] = None,
    start: int = 1,
) -> Tuple[str, Dict[str, Any]]:
    """Render the WHERE clause; empty when there is nothing to filter on."""
    clauses = []
    params: Dict[str, Any] = {}
    index = start
    for column, value in filters:
        _check_identifier(column)
        value = DatabaseValue.of(value)
        if value.is_null:
            clauses.append(f"{column} IS NULL")
            continue
        name = f"p{index}"
        clauses.append(f"{column} = :{name}")
        params[name] = value.encode()
        index += 1

    if scope == ArchiveScope.UNARCHIVED:
        clauses.append(f"{_qualify(table, 'archived_at')} IS NULL")
    elif scope == ArchiveScope.ARCHIVED:
        clauses.append(f"{_qualify(table, 'archived_at')} IS NOT NULL")

    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


def _order(resource: Type[DatabaseResource], order_by: Optional[str], table: Optional[str] = None) -> str:
    if order_by:
        return f" ORDER BY {_check_ordering(order_by)}"
    if resource.is_creatable:
        return f" ORDER BY {_qualify(table, 'created_at')} ASC"
    return ""


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _stamped(
    resource: Type[DatabaseResource],
    pairs: Filters,
    now: datetime,
    on_insert: bool,
) -> List[Tuple[str, DatabaseValue]]:
    """
    Caller pairs plus the bookkeeping columns the resource flags ask for.

    Bookkeeping columns supplied by the caller are replaced.
    """
    automatic: List[Tuple[str, DatabaseValue]] = []
    if on_insert and resource.is_creatable:
        automatic.append(("created_at", DatabaseValue.timestamp(now)))
    if resource.is_updatable:
        automatic.append(("updated_at", DatabaseValue.timestamp(now)))
    if resource.is_expirable:
        automatic.append(("expires_at", DatabaseValue.timestamp(now + timedelta(days=EXPIRY_DAYS))))

    replaced = {column for column, _ in automatic} | {"id"}
    kept = [(_check_identifier(column), DatabaseValue.of(value)) for column, value in pairs if column not in replaced]
    return kept + automatic


def _assignments(pairs: List[Tuple[str, DatabaseValue]]) -> Tuple[List[str], Dict[str, Any]]:
    fragments = []
    params: Dict[str, Any] = {}
    for index, (_, value) in enumerate(pairs, start=1):
        placeholder = f"p{index}"
        fragments.append(value.cast(f":{placeholder}"))
        if not value.is_null:
            params[placeholder] = value.encode()
    return fragments, params


# Builders

def build_select(
    resource: Type[DatabaseResource],
    filters: Filters = (),
    scope: ArchiveScope = ArchiveScope.ANY,
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> Statement:
    _check_scope(resource, scope)
    where, params = _where(filters, scope)
    sql = f"SELECT * FROM {resource.resource_name()}{where}{_order(resource, order_by)}"
    if limit is not None:
        sql += f" LIMIT {int(limit)}"
    return Statement(sql, params)


def build_insert(
    resource: Type[DatabaseResource],
    pairs: Filters,
    now: Optional[datetime] = None,
    new_id: Optional[str] = None,
) -> Statement:
    values = _stamped(resource, pairs, _now(now), on_insert=True)
    if resource.has_id:
        values.insert(0, ("id", DatabaseValue.string(new_id or str(uuid.uuid4()))))
    if not values:
        raise ValueError(f"Nothing to insert into {resource.resource_name()}")

    casts, params = _assignments(values)
    columns = ", ".join(column for column, _ in values)
    sql = (
        f"INSERT INTO {resource.resource_name()} ({columns}) "
        f"VALUES ({', '.join(casts)}) RETURNING *"
    )
    return Statement(sql, params)


def build_update(
    resource: Type[DatabaseResource],
    resource_id: str,
    pairs: Filters,
    now: Optional[datetime] = None,
) -> Optional[Statement]:
    """
    UPDATE by id. Returns None when there is nothing to set, in which case
    the caller only re-reads the row.
    """
    values = _stamped(resource, pairs, _now(now), on_insert=False)
    values = [(column, value) for column, value in values if column != "created_at"]
    if not values:
        return None

    casts, params = _assignments(values)
    assignments = ", ".join(f"{column} = {cast}" for (column, _), cast in zip(values, casts))
    params["id"] = resource_id
    return Statement(f"UPDATE {resource.resource_name()} SET {assignments} WHERE id = :id", params)


def build_delete(
    resource: Type[DatabaseResource],
    filters: Filters,
    now: Optional[datetime] = None,
) -> Statement:
    """
    Archive matching rows of an archivable resource, hard-delete otherwise.

    Raises:
        ValueError: If no filters are given
    """
    if not filters:
        raise ValueError(f"Refusing to delete every row of {resource.resource_name()}")

    table = resource.resource_name()
    if resource.is_archivable:
        where, params = _where(filters, ArchiveScope.UNARCHIVED)
        params["archived_at"] = _now(now)
        return Statement(
            f"UPDATE {table} SET archived_at = CAST(:archived_at AS TIMESTAMPTZ){where}",
            params,
        )

    where, params = _where(filters)
    return Statement(f"DELETE FROM {table}{where}", params)


def build_restore(
    resource: Type[DatabaseResource],
    resource_id: str,
    now: Optional[datetime] = None,
) -> Statement:
    if not resource.is_archivable:
        raise ValueError(f"{resource.resource_name()} is not archivable")

    assignments = "archived_at = NULL"
    params: Dict[str, Any] = {"id": resource_id}
    if resource.is_updatable:
        assignments += ", updated_at = CAST(:updated_at AS TIMESTAMPTZ)"
        params["updated_at"] = _now(now)
    return Statement(f"UPDATE {resource.resource_name()} SET {assignments} WHERE id = :id", params)


def build_join(
    resource: Type[DatabaseResource],
    join: Type[DatabaseResource],
    filters: Filters = (),
    scope: ArchiveScope = ArchiveScope.UNARCHIVED,
    order_by: Optional[str] = None,
) -> Statement:
    """
    SELECT rows of `resource` joined to `join` through
    ``join.<singular(resource)>_id = resource.id``.

    Filter columns should be table-qualified where both tables share a name.
    """
    if not resource.is_archivable:
        scope = ArchiveScope.ANY
    table = resource.resource_name()
    join_table = join.resource_name()
    where, params = _where(filters, scope, table=table)
    sql = (
        f"SELECT {table}.* FROM {table} "
        f"JOIN {join_table} ON {join_table}.{singularize(table)}_id = {table}.id"
        f"{where}{_order(resource, order_by, table=table)}"
    )
    return Statement(sql, params)


# Executors

async def execute_statement(db: AsyncSession, statement: Statement, commit: bool = False):
    """
    Run a statement and return ``(rows, rowcount)``.

    Rows are fetched before committing. Driver failures are rolled back,
    logged and re-raised as DatabaseError.
    """
    try:
        result = await db.execute(text(statement.sql), statement.params)
        rows = result.mappings().all() if result.returns_rows else []
        rowcount = result.rowcount
        if commit:
            await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Database query failed", sql=statement.sql, error=str(e))
        raise DatabaseError(str(e)) from e
    return rows, rowcount


async def _find_all(
    db: AsyncSession,
    resource: Type[R],
    filters: Filters,
    scope: ArchiveScope,
    order_by: Optional[str] = None,
) -> List[R]:
    rows, _ = await execute_statement(db, build_select(resource, filters, scope, order_by))
    return [resource.from_row(row) for row in rows]


async def _find_one(
    db: AsyncSession,
    resource: Type[R],
    filters: Filters,
    scope: ArchiveScope,
    order_by: Optional[str] = None,
) -> R:
    rows, _ = await execute_statement(db, build_select(resource, filters, scope, order_by, limit=1))
    if not rows:
        raise ResourceNotFoundError(f"No {resource.resource_name()} row matches {list(filters)!r}")
    return resource.from_row(rows[0])


async def find_one(db: AsyncSession, resource: Type[R], filters: Filters, order_by: Optional[str] = None) -> R:
    return await _find_one(db, resource, filters, ArchiveScope.ANY, order_by)


async def find_one_unarchived(db: AsyncSession, resource: Type[R], filters: Filters, order_by: Optional[str] = None) -> R:
    return await _find_one(db, resource, filters, ArchiveScope.UNARCHIVED, order_by)


async def find_one_archived(db: AsyncSession, resource: Type[R], filters: Filters, order_by: Optional[str] = None) -> R:
    return await _find_one(db, resource, filters, ArchiveScope.ARCHIVED, order_by)


async def find_all(db: AsyncSession, resource: Type[R], filters: Filters = (), order_by: Optional[str] = None) -> List[R]:
    return await _find_all(db, resource, filters, ArchiveScope.ANY, order_by)


async def find_all_unarchived(db: AsyncSession, resource: Type[R], filters: Filters = (), order_by: Optional[str] = None) -> List[R]:
    return await _find_all(db, resource, filters, ArchiveScope.UNARCHIVED, order_by)


async def find_all_archived(db: AsyncSession, resource: Type[R], filters: Filters = (), order_by: Optional[str] = None) -> List[R]:
    return await _find_all(db, resource, filters, ArchiveScope.ARCHIVED, order_by)


async def insert_resource(db: AsyncSession, resource: Type[R], pairs: Filters) -> R:
    rows, _ = await execute_statement(db, build_insert(resource, pairs), commit=True)
    if not rows:
        raise DatabaseError(f"Insert into {resource.resource_name()} returned no row")
    return resource.from_row(rows[0])


async def update_resource(db: AsyncSession, resource: Type[R], resource_id: str, pairs: Filters) -> R:
    """
    Apply `pairs` to the row with `resource_id` and return the re-read row.

    Raises:
        ResourceNotFoundError: If no row has that id
    """
    statement = build_update(resource, resource_id, pairs)
    if statement is not None:
        _, rowcount = await execute_statement(db, statement, commit=True)
        if rowcount == 0:
            raise ResourceNotFoundError(f"No {resource.resource_name()} row with id {resource_id}")
    return await find_one(db, resource, [("id", resource_id)])


async def delete_resources(db: AsyncSession, resource: Type[DatabaseResource], filters: Filters) -> int:
    _, rowcount = await execute_statement(db, build_delete(resource, filters), commit=True)
    return rowcount


async def restore_resource(db: AsyncSession, resource: Type[R], resource_id: str) -> R:
    _, rowcount = await execute_statement(db, build_restore(resource, resource_id), commit=True)
    if rowcount == 0:
        raise ResourceNotFoundError(f"No {resource.resource_name()} row with id {resource_id}")
    return await find_one(db, resource, [("id", resource_id)])


async def join_all(
    db: AsyncSession,
    resource: Type[R],
    join: Type[DatabaseResource],
    filters: Filters = (),
    scope: ArchiveScope = ArchiveScope.UNARCHIVED,
    order_by: Optional[str] = None,
) -> List[R]:
    rows, _ = await execute_statement(db, build_join(resource, join, filters, scope, order_by))
    return [resource.from_row(row) for row in rows]
