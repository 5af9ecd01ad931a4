class DatabaseError(Exception):
    """A query failed; the driver error, if any, is chained as __cause__."""


class ResourceNotFoundError(DatabaseError):
    """A single-row lookup matched no rows."""


class ResourceDecodeError(DatabaseError):
    """A result row could not be mapped onto its resource."""
