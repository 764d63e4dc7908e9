"""
Core exceptions and logging utilities.
"""

from .exceptions import (
    ConfigError,
    DbSnapError,
    DecodeError,
    MissingTableError,
    ShapeMismatchError,
    SnapshotMismatchError,
    SnapshotPathError,
    StoreError,
    UnknownRecordShapeError,
    UnknownTableError,
)
from .logging import configure_logging

__all__ = [
    "ConfigError",
    "DbSnapError",
    "DecodeError",
    "MissingTableError",
    "ShapeMismatchError",
    "SnapshotMismatchError",
    "SnapshotPathError",
    "StoreError",
    "UnknownRecordShapeError",
    "UnknownTableError",
    "configure_logging",
]
