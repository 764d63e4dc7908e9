"""
Store interface consumed by the snapshot renderers.

The storage engine itself lives outside this package. Renderers only need
a read-only transaction that can iterate a table's raw key/value pairs in
key order and expose the index's computed values.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Iterable, Iterator, Mapping, Optional, Set, Tuple


class ReadTxn(ABC):
    """
    A read-only, point-in-time view of the store.

    A transaction is only valid inside the ``read_txn()`` block that
    produced it.
    """

    @abstractmethod
    def iter_table(self, table: str) -> Iterator[Tuple[bytes, bytes]]:
        """
        Iterate raw (key, value) pairs of a table in ascending key order.

        Raises:
            MissingTableError: If the store has no such table
        """
        pass

    @abstractmethod
    def setting(self, name: str) -> Any:
        """Get a computed setting, or None when it is unset."""
        pass

    @abstractmethod
    def fields_ids_map(self) -> Mapping[int, str]:
        """Get the field id to field name mapping."""
        pass

    @abstractmethod
    def field_distribution(self) -> Mapping[str, int]:
        """Get the number of documents containing each field."""
        pass

    @abstractmethod
    def documents_ids(self) -> Iterable[int]:
        pass

    @abstractmethod
    def soft_deleted_documents_ids(self) -> Iterable[int]:
        pass

    @abstractmethod
    def geo_faceted_documents_ids(self) -> Iterable[int]:
        pass

    @abstractmethod
    def number_faceted_documents_ids(self, field_id: int) -> Iterable[int]:
        pass

    @abstractmethod
    def string_faceted_documents_ids(self, field_id: int) -> Iterable[int]:
        pass

    @abstractmethod
    def external_documents_ids(self) -> Tuple[bytes, bytes]:
        """Get the raw bytes of the (soft, hard) external id sets."""
        pass

    @abstractmethod
    def words_fst(self) -> bytes:
        """Get the raw bytes of the set of all indexed words."""
        pass

    @abstractmethod
    def words_prefixes_fst(self) -> bytes:
        """Get the raw bytes of the set of indexed word prefixes."""
        pass

    @abstractmethod
    def stop_words(self) -> Optional[Set[str]]:
        pass


class IndexStore(ABC):
    """
    Abstract base class for stores that can be snapshotted.

    Implementations must support several concurrent read transactions,
    each observing a consistent view of the store.
    """

    @abstractmethod
    def read_txn(self) -> AbstractContextManager:
        """
        Open a read-only transaction.

        Returns:
            Context manager yielding a ReadTxn, released when the block exits
        """
        pass
