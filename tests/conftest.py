"""
Shared test fixtures and configuration for pytest.
"""

import logging
import sys
from pathlib import Path

import pytest
from pyroaring import BitMap

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dbsnap.codecs import (
    BEU32StrCodec,
    BoRoaringBitmapCodec,
    CboRoaringBitmapCodec,
    FacetLevelValueF64Codec,
    FacetLevelValueU32Codec,
    FacetStringLevelZeroCodec,
    FacetStringLevelZeroValueCodec,
    FacetStringZeroBoundsValueCodec,
    FieldIdWordCountCodec,
    RoaringBitmapCodec,
    StrBEU32Codec,
    StrCodec,
    StrStrU8Codec,
)
from dbsnap.store import MemoryIndexStore

pytest_plugins = ["dbsnap.pytest_plugin"]


logger = logging.getLogger(__name__)


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")


# ============================================================================
# Index builders
# ============================================================================

def build_index_store() -> MemoryIndexStore:
    """
    Build a small two-document index.

    Documents 0 and 1 share the word "hello"; document 1 also has "world".
    Field 0 is "title", field 1 is "color".
    """
    store = MemoryIndexStore()
    words = StrCodec()
    roaring = RoaringBitmapCodec()
    cbo = CboRoaringBitmapCodec()

    store.put("word_docids", words.encode("hello"), roaring.encode([0, 1]))
    store.put("word_docids", words.encode("world"), roaring.encode([1]))
    store.put("word_prefix_docids", words.encode("he"), roaring.encode([0, 1]))

    store.put(
        "docid_word_positions",
        BEU32StrCodec().encode((0, "hello")),
        BoRoaringBitmapCodec().encode([0]),
    )
    store.put(
        "word_pair_proximity_docids",
        StrStrU8Codec().encode(("hello", "world", 1)),
        cbo.encode([1]),
    )
    store.put(
        "word_position_docids",
        StrBEU32Codec().encode(("hello", 0)),
        cbo.encode([0, 1]),
    )
    store.put(
        "field_id_word_count_docids",
        FieldIdWordCountCodec().encode((0, 1)),
        cbo.encode([0]),
    )

    f64_keys = FacetLevelValueF64Codec()
    store.put("facet_id_f64_docids", f64_keys.encode((1, 0, 3.0, 3.0)), cbo.encode([0]))
    store.put("facet_id_f64_docids", f64_keys.encode((1, 1, 1.5, 3.0)), cbo.encode([0, 1]))

    store.put(
        "facet_id_string_docids",
        FacetStringLevelZeroCodec().encode((1, "blue")),
        FacetStringLevelZeroValueCodec().encode(("Blue", [0])),
    )
    store.put(
        "facet_id_string_docids",
        FacetLevelValueU32Codec().encode((1, 1, 0, 1)),
        FacetStringZeroBoundsValueCodec().encode((("blue", "red"), [0, 1])),
    )
    store.put(
        "facet_id_string_docids",
        FacetLevelValueU32Codec().encode((1, 2, 0, 0)),
        FacetStringZeroBoundsValueCodec().encode((None, [0, 1])),
    )

    main = store.main
    main.documents_ids.update([0, 1])
    main.fields_ids_map.update({0: "title", 1: "color"})
    main.field_distribution.update({"title": 2, "color": 2})
    main.string_faceted[1] = BitMap([0, 1])
    main.words_fst = b"\x01\xab"

    store.set_setting("primary_key", "id")
    store.set_setting("criteria", ["words", "typo"])
    store.set_setting("filterable_fields", {"color"})
    store.set_setting("authorize_typos", True)
    return store


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def index_store() -> MemoryIndexStore:
    """Fixture providing a populated in-memory index."""
    return build_index_store()


@pytest.fixture
def empty_store() -> MemoryIndexStore:
    """Fixture providing an index with every table empty."""
    return MemoryIndexStore()


@pytest.fixture
def clean_env(monkeypatch):
    """Fixture removing every harness environment override."""
    for name in (
        "DBSNAP_CONFIG",
        "DBSNAP_FULL_SNAPS",
        "DBSNAP_UPDATE_SNAPSHOTS",
        "DBSNAP_SNAPSHOT_ROOT",
        "DBSNAP_SOURCE_ROOT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
