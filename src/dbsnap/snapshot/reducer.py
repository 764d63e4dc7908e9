"""
Snapshot reducer.

Large snapshots are stored as a content hash instead of their full text,
keeping fixtures short while still detecting any change. The cutoff is
lower for inline snapshots, which live inside test source.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config.config_loader import load_config


logger = logging.getLogger(__name__)

INLINE_THRESHOLD = 256
FILE_THRESHOLD = 2048

HASH_SUFFIX = ".hash"
FULL_SUFFIX = ".full"


@dataclass(frozen=True)
class SnapshotRecord:
    """One named value handed to the fixture comparator."""
    name: str
    content: str

    @property
    def is_full(self) -> bool:
        """Whether this record keeps the full text of a hashed snapshot."""
        return self.name.endswith(FULL_SUFFIX)


def content_hash(snap: str) -> str:
    """Return the 128-bit MD5 digest of ``snap`` as lowercase hex."""
    return hashlib.md5(snap.encode("utf-8"), usedforsecurity=False).hexdigest()


def threshold_for(inline: bool) -> int:
    return INLINE_THRESHOLD if inline else FILE_THRESHOLD


def convert_snap_to_hash_if_needed(
    name: str,
    snap: str,
    inline: bool,
    store_full: Optional[bool] = None,
) -> List[SnapshotRecord]:
    """
    Decide how a snapshot is stored.

    Snapshots shorter than the threshold are kept as they are. Longer ones
    are replaced by ``<name>.hash``, preceded by ``<name>.full`` holding the
    text when ``store_full`` is enabled.

    Args:
        name: Snapshot name
        snap: Full snapshot text
        inline: True for inline assertions, False for fixture files
        store_full: Keep the full text of hashed snapshots; read from
            configuration (``DBSNAP_FULL_SNAPS``) when omitted

    Returns:
        The records to compare, in order

    Raises:
        ConfigError: If the configured override is not a boolean
    """
    if store_full is None:
        store_full = load_config().store_full

    threshold = threshold_for(inline)
    if len(snap) < threshold:
        return [SnapshotRecord(name, snap)]

    records = []
    if store_full:
        records.append(SnapshotRecord(f"{name}{FULL_SUFFIX}", snap))
    records.append(SnapshotRecord(f"{name}{HASH_SUFFIX}", content_hash(snap)))

    logger.debug(
        f"Snapshot of {len(snap)} characters reduced to its hash (threshold {threshold})",
        extra={"snapshot": name},
    )
    return records
