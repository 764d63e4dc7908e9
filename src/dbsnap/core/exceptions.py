"""
Custom exceptions for the database snapshot harness.

Every error raised here is fatal for the snapshot being computed: there is
no retry tier. A failed snapshot aborts the enclosing test.
"""

from typing import Optional


class DbSnapError(Exception):
    """Base exception for all snapshot harness errors."""
    pass


class DecodeError(DbSnapError):
    """
    A record's bytes could not be decoded by the codec its table expects.

    Raised when:
    - A key or value is truncated or has trailing garbage
    - A string field is not valid UTF-8
    - A compressed integer set cannot be deserialized

    The table name and raw key are attached once the error reaches the
    table renderer, so the failing record can be located.
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        key: Optional[bytes] = None,
    ):
        super().__init__(message)
        self.detail = message
        self.table = table
        self.key = key

    def with_context(self, table: str, key: bytes) -> "DecodeError":
        """Return this error with the table and raw key filled in."""
        self.table = table
        self.key = key
        return self

    def __str__(self) -> str:
        parts = [self.detail]
        if self.table is not None:
            parts.append(f"table={self.table}")
        if self.key is not None:
            parts.append(f"key={self.key.hex()}")
        return " ".join(parts)


class ShapeMismatchError(DecodeError):
    """
    The bytes are well-formed but do not have this codec's record shape.

    Only tables holding several record layouts treat this as recoverable,
    by trying the next codec in their fixed order.
    """
    pass


class UnknownRecordShapeError(DecodeError):
    """No codec of a heterogeneous table accepted the record."""
    pass


class ConfigError(DbSnapError):
    """
    Error in harness configuration.

    Raised when:
    - A boolean override is not `true` or `false`
    - The configuration file is missing or is not valid YAML
    """
    pass


class StoreError(DbSnapError):
    """Error reported by the underlying store."""
    pass


class MissingTableError(StoreError):
    """The store has no table with the requested name."""

    def __init__(self, table: str):
        super().__init__(f"Table not found in store: {table}")
        self.table = table


class UnknownTableError(DbSnapError):
    """No formatter is registered for the requested snapshot name."""

    def __init__(self, name: str):
        super().__init__(f"No snapshot formatter registered for: {name}")
        self.name = name


class SnapshotPathError(DbSnapError):
    """The call site cannot be mapped to a fixture location."""
    pass


class SnapshotMismatchError(AssertionError):
    """
    A rendered snapshot differs from its stored fixture.

    Subclasses AssertionError so pytest reports it as a failed assertion.
    """

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name
