"""
Tagged column values for parameter binding.

Every value handed to the query layer is a DatabaseValue. The tag decides how
the value is cast inside INSERT/UPDATE statements; the bind parameter itself
is always sent as the driver-native Python value.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class ValueKind(str, Enum):
    """Variants a DatabaseValue can hold"""
    NONE = "none"
    STR = "str"          # fixed string
    STRING = "string"    # owned string
    INT = "int"          # int32
    INT64 = "int64"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


_SQL_CASTS = {
    ValueKind.DATETIME: "TIMESTAMPTZ",
    ValueKind.INT: "INTEGER",
    ValueKind.INT64: "BIGINT",
    ValueKind.FLOAT: "FLOAT",
    ValueKind.BOOLEAN: "BOOLEAN",
}


class DatabaseValue:
    """
    A column value tagged with its kind.

    Usage:
        DatabaseValue.string("alice")
        DatabaseValue.integer(3)
        DatabaseValue.timestamp(datetime.now(timezone.utc))
        DatabaseValue.of(value)  # infer the kind from a Python value
    """

    __slots__ = ("kind", "value")

    def __init__(self, kind: ValueKind, value: Any = None):
        if kind == ValueKind.NONE:
            value = None
        elif kind == ValueKind.INT and not INT32_MIN <= int(value) <= INT32_MAX:
            raise ValueError(f"{value} does not fit in a 32-bit integer")
        self.kind = kind
        self.value = value

    # Constructors

    @classmethod
    def none(cls) -> "DatabaseValue":
        return cls(ValueKind.NONE)

    @classmethod
    def static(cls, value: str) -> "DatabaseValue":
        return cls(ValueKind.STR, value)

    @classmethod
    def string(cls, value: str) -> "DatabaseValue":
        return cls(ValueKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> "DatabaseValue":
        return cls(ValueKind.INT, value)

    @classmethod
    def bigint(cls, value: int) -> "DatabaseValue":
        return cls(ValueKind.INT64, value)

    @classmethod
    def double(cls, value: float) -> "DatabaseValue":
        return cls(ValueKind.FLOAT, value)

    @classmethod
    def boolean(cls, value: bool) -> "DatabaseValue":
        return cls(ValueKind.BOOLEAN, value)

    @classmethod
    def timestamp(cls, value: datetime) -> "DatabaseValue":
        return cls(ValueKind.DATETIME, value)

    @classmethod
    def of(cls, value: Any) -> "DatabaseValue":
        """Wrap a plain Python value, inferring its kind."""
        if isinstance(value, DatabaseValue):
            return value
        if value is None:
            return cls.none()
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return cls.boolean(value)
        if isinstance(value, int):
            if INT32_MIN <= value <= INT32_MAX:
                return cls.integer(value)
            return cls.bigint(value)
        if isinstance(value, float):
            return cls.double(value)
        if isinstance(value, datetime):
            return cls.timestamp(value)
        if isinstance(value, Enum):
            return cls.string(str(value.value))
        return cls.string(value if isinstance(value, str) else f"{value}")

    # Binding

    @property
    def is_null(self) -> bool:
        return self.kind == ValueKind.NONE

    @staticmethod
    def type_info() -> str:
        """Wire type shared by every variant."""
        return "text"

    def encode(self) -> Optional[Any]:
        """Value handed to the driver; None binds as SQL NULL."""
        return self.value

    def cast(self, placeholder: str) -> str:
        """
        SQL fragment for this value at `placeholder` (e.g. ":p1").

        NONE renders as a literal NULL, strings are left untyped and every
        other kind is wrapped in a CAST to its SQL type.
        """
        if self.is_null:
            return "NULL"
        sql_type = _SQL_CASTS.get(self.kind)
        if sql_type is None:
            return placeholder
        return f"CAST({placeholder} AS {sql_type})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DatabaseValue):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __repr__(self) -> str:
        return f"DatabaseValue.{self.kind.value}({self.value!r})"
