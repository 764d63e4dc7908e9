"""
Store interface and the in-memory reference store.
"""

from .base import IndexStore, ReadTxn
from .memory import STANDARD_TABLES, MemoryIndexStore, MemoryReadTxn

__all__ = [
    "IndexStore",
    "ReadTxn",
    "STANDARD_TABLES",
    "MemoryIndexStore",
    "MemoryReadTxn",
]
