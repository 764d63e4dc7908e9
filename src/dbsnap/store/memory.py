"""
In-memory store for tests and local experiments.

Keeps every table as a dict of raw bytes and hands each read transaction
a frozen copy, so readers never observe later writes.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from pyroaring import BitMap

from ..core.exceptions import MissingTableError
from .base import IndexStore, ReadTxn


logger = logging.getLogger(__name__)


STANDARD_TABLES = (
    "word_docids",
    "exact_word_docids",
    "word_prefix_docids",
    "exact_word_prefix_docids",
    "docid_word_positions",
    "word_pair_proximity_docids",
    "word_prefix_pair_proximity_docids",
    "word_position_docids",
    "field_id_word_count_docids",
    "word_prefix_position_docids",
    "facet_id_f64_docids",
    "facet_id_string_docids",
)


class _MainData:
    """Computed values of the index, outside of any table."""

    def __init__(self):
        self.settings: Dict[str, Any] = {}
        self.fields_ids_map: Dict[int, str] = {}
        self.field_distribution: Dict[str, int] = {}
        self.documents_ids = BitMap()
        self.soft_deleted_documents_ids = BitMap()
        self.geo_faceted_documents_ids = BitMap()
        self.number_faceted: Dict[int, BitMap] = {}
        self.string_faceted: Dict[int, BitMap] = {}
        self.external_soft = b""
        self.external_hard = b""
        self.words_fst = b""
        self.words_prefixes_fst = b""
        self.stop_words: Optional[Set[str]] = None

    def copy(self) -> "_MainData":
        other = _MainData()
        other.settings = dict(self.settings)
        other.fields_ids_map = dict(self.fields_ids_map)
        other.field_distribution = dict(self.field_distribution)
        other.documents_ids = BitMap(self.documents_ids)
        other.soft_deleted_documents_ids = BitMap(self.soft_deleted_documents_ids)
        other.geo_faceted_documents_ids = BitMap(self.geo_faceted_documents_ids)
        other.number_faceted = {k: BitMap(v) for k, v in self.number_faceted.items()}
        other.string_faceted = {k: BitMap(v) for k, v in self.string_faceted.items()}
        other.external_soft = self.external_soft
        other.external_hard = self.external_hard
        other.words_fst = self.words_fst
        other.words_prefixes_fst = self.words_prefixes_fst
        other.stop_words = None if self.stop_words is None else set(self.stop_words)
        return other


class MemoryReadTxn(ReadTxn):
    """Read transaction over a frozen copy of a MemoryIndexStore."""

    def __init__(self, tables: Dict[str, List[Tuple[bytes, bytes]]], main: _MainData):
        self._tables = tables
        self._main = main

    def iter_table(self, table: str) -> Iterator[Tuple[bytes, bytes]]:
        if table not in self._tables:
            raise MissingTableError(table)
        return iter(self._tables[table])

    def setting(self, name: str) -> Any:
        return self._main.settings.get(name)

    def fields_ids_map(self) -> Mapping[int, str]:
        return self._main.fields_ids_map

    def field_distribution(self) -> Mapping[str, int]:
        return self._main.field_distribution

    def documents_ids(self) -> BitMap:
        return self._main.documents_ids

    def soft_deleted_documents_ids(self) -> BitMap:
        return self._main.soft_deleted_documents_ids

    def geo_faceted_documents_ids(self) -> BitMap:
        return self._main.geo_faceted_documents_ids

    def number_faceted_documents_ids(self, field_id: int) -> BitMap:
        return self._main.number_faceted.get(field_id, BitMap())

    def string_faceted_documents_ids(self, field_id: int) -> BitMap:
        return self._main.string_faceted.get(field_id, BitMap())

    def external_documents_ids(self) -> Tuple[bytes, bytes]:
        return self._main.external_soft, self._main.external_hard

    def words_fst(self) -> bytes:
        return self._main.words_fst

    def words_prefixes_fst(self) -> bytes:
        return self._main.words_prefixes_fst

    def stop_words(self) -> Optional[Set[str]]:
        return self._main.stop_words


class MemoryIndexStore(IndexStore):
    """
    Dict-backed implementation of the store interface.

    Example:
        >>> store = MemoryIndexStore()
        >>> store.put("word_docids", b"hello", RoaringBitmapCodec().encode([1, 2]))
        >>> with store.read_txn() as txn:
        ...     list(txn.iter_table("word_docids"))
    """

    def __init__(self, tables: Iterable[str] = STANDARD_TABLES):
        self._lock = threading.Lock()
        self._tables: Dict[str, Dict[bytes, bytes]] = {name: {} for name in tables}
        self.main = _MainData()
        self.open_readers = 0

    def create_table(self, table: str) -> None:
        with self._lock:
            self._tables.setdefault(table, {})

    def put(self, table: str, key: bytes, value: bytes) -> None:
        """Insert or replace one raw record."""
        with self._lock:
            if table not in self._tables:
                raise MissingTableError(table)
            self._tables[table][bytes(key)] = bytes(value)

    def set_setting(self, name: str, value: Any) -> None:
        with self._lock:
            self.main.settings[name] = value

    def _freeze(self) -> Tuple[Dict[str, List[Tuple[bytes, bytes]]], _MainData]:
        tables = {
            name: sorted(records.items())
            for name, records in self._tables.items()
        }
        return tables, self.main.copy()

    @contextmanager
    def read_txn(self) -> Iterator[MemoryReadTxn]:
        with self._lock:
            tables, main = self._freeze()
            self.open_readers += 1
        logger.debug(f"Opened read transaction ({self.open_readers} open)")
        try:
            yield MemoryReadTxn(tables, main)
        finally:
            with self._lock:
                self.open_readers -= 1
            logger.debug(f"Closed read transaction ({self.open_readers} open)")
