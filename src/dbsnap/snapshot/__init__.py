"""
Snapshot harness: reduction, fixture location and comparison.
"""

from .comparator import FileSnapshotComparator, SnapshotComparator, assert_inline_snapshot
from .harness import DbSnapshot, db_snap, snapshot_index
from .identity import SnapshotLocation, name_from_test_id, resolve_snapshot_location
from .reducer import (
    FILE_THRESHOLD,
    INLINE_THRESHOLD,
    SnapshotRecord,
    content_hash,
    convert_snap_to_hash_if_needed,
)

__all__ = [
    "FileSnapshotComparator",
    "SnapshotComparator",
    "assert_inline_snapshot",
    "DbSnapshot",
    "db_snap",
    "snapshot_index",
    "SnapshotLocation",
    "name_from_test_id",
    "resolve_snapshot_location",
    "FILE_THRESHOLD",
    "INLINE_THRESHOLD",
    "SnapshotRecord",
    "content_hash",
    "convert_snap_to_hash_if_needed",
]
