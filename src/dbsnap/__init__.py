"""
dbsnap - snapshot testing for a search index store.

Renders the tables of an index as deterministic text, reduces large
renderings to a content hash and compares them against fixture files or
inline literals.
"""

__version__ = "0.1.0"

from .core.exceptions import (
    ConfigError,
    DbSnapError,
    DecodeError,
    SnapshotMismatchError,
)
from .render.tables import TableName, full_snap_of_db
from .snapshot.harness import DbSnapshot, db_snap, snapshot_index
from .snapshot.reducer import convert_snap_to_hash_if_needed

__all__ = [
    "__version__",
    "ConfigError",
    "DbSnapError",
    "DecodeError",
    "SnapshotMismatchError",
    "TableName",
    "full_snap_of_db",
    "DbSnapshot",
    "db_snap",
    "snapshot_index",
    "convert_snap_to_hash_if_needed",
]
