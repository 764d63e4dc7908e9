"""
Snapshot assertions over an index store.

``db_snap`` renders one table and hands the reduced records to the fixture
comparator (or to an inline literal). ``snapshot_index`` does the same for
every table of the index inside a single read transaction.
"""

import logging
import re
from typing import List, Optional, Union

from ..render.tables import FORMATTERS, TableName, full_snap_of_db, resolve_table_name
from ..store.base import IndexStore
from .comparator import SnapshotComparator, assert_inline_snapshot
from .identity import SnapshotLocation
from .reducer import SnapshotRecord, convert_snap_to_hash_if_needed


logger = logging.getLogger(__name__)


def db_snap(
    store: IndexStore,
    table: Union[str, TableName],
    name: Optional[str] = None,
    inline: Optional[str] = None,
    *,
    location: SnapshotLocation,
    comparator: SnapshotComparator,
    store_full: Optional[bool] = None,
) -> List[SnapshotRecord]:
    """
    Snapshot one table of the index.

    Without ``inline`` the rendered table is compared against the fixture
    files of ``location`` (under the case directory ``name`` when given).
    With ``inline`` it is compared against that literal instead, except for
    a ``.full`` record, which always goes to a fixture file.

    Args:
        store: Store to read from
        table: Table or computed value to snapshot
        name: Optional case label
        inline: Optional expected literal
        location: Fixture location of the calling test
        comparator: Comparator for fixture files
        store_full: Keep the full text of hashed snapshots; read from
            configuration when omitted

    Returns:
        The records that were compared

    Raises:
        SnapshotMismatchError: If a comparison fails
        DecodeError: If the table cannot be rendered
    """
    table = resolve_table_name(table)
    location = location.for_case(name)
    snap = full_snap_of_db(store, table)

    records = convert_snap_to_hash_if_needed(
        table.value, snap, inline=inline is not None, store_full=store_full
    )
    for record in records:
        if inline is not None and not record.is_full:
            assert_inline_snapshot(record.content, inline, name=record.name)
        else:
            comparator.assert_snapshot(location, record.name, record.content)
    return records


def _selected(table: TableName, include: Optional[str], exclude: Optional[str]) -> bool:
    if include is not None and not re.search(include, table.value):
        return False
    if exclude is not None and re.search(exclude, table.value):
        return False
    return True


def snapshot_index(
    store: IndexStore,
    location: SnapshotLocation,
    comparator: SnapshotComparator,
    include: Optional[str] = None,
    exclude: Optional[str] = None,
    store_full: Optional[bool] = None,
) -> List[SnapshotRecord]:
    """
    Snapshot every table of the index to fixture files.

    All tables are rendered from the same read transaction, then compared
    in the catalogue order.

    Args:
        include: Only tables whose name matches this regular expression
        exclude: Skip tables whose name matches this regular expression
    """
    tables = [table for table in TableName if _selected(table, include, exclude)]

    rendered = []
    with store.read_txn() as txn:
        for table in tables:
            rendered.append((table, FORMATTERS[table](txn)))

    records = []
    for table, snap in rendered:
        for record in convert_snap_to_hash_if_needed(
            table.value, snap, inline=False, store_full=store_full
        ):
            comparator.assert_snapshot(location, record.name, record.content)
            records.append(record)

    logger.debug(
        f"Compared {len(records)} records across {len(tables)} tables",
        extra={"test_name": location.test_name},
    )
    return records


class DbSnapshot:
    """
    ``db_snap`` bound to one test's location and comparator.

    Example:
        >>> db_snapshot(store, "word_docids")
        >>> db_snapshot(store, "documents_ids", inline="[0, 1, 2, ]")
    """

    def __init__(
        self,
        location: SnapshotLocation,
        comparator: SnapshotComparator,
        store_full: Optional[bool] = None,
    ):
        self.location = location
        self.comparator = comparator
        self.store_full = store_full

    def __call__(
        self,
        store: IndexStore,
        table: Union[str, TableName],
        name: Optional[str] = None,
        inline: Optional[str] = None,
    ) -> List[SnapshotRecord]:
        return db_snap(
            store,
            table,
            name,
            inline,
            location=self.location,
            comparator=self.comparator,
            store_full=self.store_full,
        )

    def index(
        self,
        store: IndexStore,
        include: Optional[str] = None,
        exclude: Optional[str] = None,
    ) -> List[SnapshotRecord]:
        return snapshot_index(
            store,
            self.location,
            self.comparator,
            include=include,
            exclude=exclude,
            store_full=self.store_full,
        )
