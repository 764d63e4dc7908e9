"""
Entry formatter registry.

Maps every snapshot-able name of the index to the function rendering it.
Table-backed names decode each raw record with the table's codec pair and
emit one fixed-column line per record, in the table's key order. The
column widths are part of the fixture format.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Tuple, Union

from ..codecs.base import Codec
from ..codecs.bitmaps import BoRoaringBitmapCodec, CboRoaringBitmapCodec, RoaringBitmapCodec
from ..codecs.facets import FacetLevelValueF64Codec
from ..codecs.keys import (
    BEU32StrCodec,
    FieldIdWordCountCodec,
    StrBEU32Codec,
    StrCodec,
    StrStrU8Codec,
)
from ..core.exceptions import DecodeError, UnknownTableError
from ..store.base import IndexStore, ReadTxn
from .facets import snap_facet_id_string_docids
from .primitives import debug_repr, display_bitmap, display_float, hex_dump
from .settings import snap_settings


logger = logging.getLogger(__name__)


WORD_WIDTH = 16
PREFIX_WIDTH = 4
DOCID_WIDTH = 6
PROXIMITY_WIDTH = 2
POSITION_WIDTH = 6
FIELD_ID_WIDTH = 3
WORD_COUNT_WIDTH = 6
LEVEL_WIDTH = 2
FACET_BOUND_WIDTH = 6
FIELD_NAME_WIDTH = 16
DOCUMENT_COUNT_WIDTH = 6


class TableName(str, Enum):
    """Every name that can be snapshotted."""
    SETTINGS = "settings"
    WORD_DOCIDS = "word_docids"
    EXACT_WORD_DOCIDS = "exact_word_docids"
    WORD_PREFIX_DOCIDS = "word_prefix_docids"
    EXACT_WORD_PREFIX_DOCIDS = "exact_word_prefix_docids"
    DOCID_WORD_POSITIONS = "docid_word_positions"
    WORD_PAIR_PROXIMITY_DOCIDS = "word_pair_proximity_docids"
    WORD_PREFIX_PAIR_PROXIMITY_DOCIDS = "word_prefix_pair_proximity_docids"
    WORD_POSITION_DOCIDS = "word_position_docids"
    FIELD_ID_WORD_COUNT_DOCIDS = "field_id_word_count_docids"
    WORD_PREFIX_POSITION_DOCIDS = "word_prefix_position_docids"
    FACET_ID_F64_DOCIDS = "facet_id_f64_docids"
    FACET_ID_STRING_DOCIDS = "facet_id_string_docids"
    DOCUMENTS_IDS = "documents_ids"
    STOP_WORDS = "stop_words"
    SOFT_DELETED_DOCUMENTS_IDS = "soft_deleted_documents_ids"
    FIELD_DISTRIBUTION = "field_distribution"
    FIELDS_IDS_MAP = "fields_ids_map"
    GEO_FACETED_DOCUMENTS_IDS = "geo_faceted_documents_ids"
    EXTERNAL_DOCUMENTS_IDS = "external_documents_ids"
    NUMBER_FACETED_DOCUMENTS_IDS = "number_faceted_documents_ids"
    STRING_FACETED_DOCUMENTS_IDS = "string_faceted_documents_ids"
    WORDS_FST = "words_fst"
    WORDS_PREFIXES_FST = "words_prefixes_fst"


Formatter = Callable[[ReadTxn], str]


def iter_decoded(
    txn: ReadTxn,
    table: str,
    key_codec: Codec,
    value_codec: Codec,
) -> Iterator[Tuple[Any, Any]]:
    """
    Iterate a table's records decoded with the given codecs.

    Raises:
        DecodeError: On the first record either codec rejects, with the
            table name and raw key attached
    """
    for key, value in txn.iter_table(table):
        try:
            yield key_codec.decode(key), value_codec.decode(value)
        except DecodeError as e:
            raise e.with_context(table, key)


def table_formatter(
    table: TableName,
    key_codec: Codec,
    value_codec: Codec,
    format_entry: Callable[[Any, Any], str],
) -> Formatter:
    """Build a formatter emitting one ``format_entry`` line per record."""

    def snap(txn: ReadTxn) -> str:
        lines = [
            format_entry(key, value) + "\n"
            for key, value in iter_decoded(txn, table.value, key_codec, value_codec)
        ]
        logger.debug(f"Rendered {len(lines)} entries", extra={"table": table.value})
        return "".join(lines)

    snap.__name__ = f"snap_{table.value}"
    return snap


def _word_line(word: str, docids) -> str:
    return f"{word:<{WORD_WIDTH}} {display_bitmap(docids)}"


def _docid_word_line(key: Tuple[int, str], docids) -> str:
    docid, word = key
    return f"{docid:<{DOCID_WIDTH}} {word:<{WORD_WIDTH}} {display_bitmap(docids)}"


def _word_pair_line(key: Tuple[str, str, int], docids) -> str:
    word1, word2, proximity = key
    return (
        f"{word1:<{WORD_WIDTH}} {word2:<{WORD_WIDTH}} "
        f"{proximity:<{PROXIMITY_WIDTH}} {display_bitmap(docids)}"
    )


def _word_prefix_pair_line(key: Tuple[str, str, int], docids) -> str:
    word, prefix, proximity = key
    return (
        f"{word:<{WORD_WIDTH}} {prefix:<{PREFIX_WIDTH}} "
        f"{proximity:<{PROXIMITY_WIDTH}} {display_bitmap(docids)}"
    )


def _word_position_line(key: Tuple[str, int], docids) -> str:
    word, position = key
    return f"{word:<{WORD_WIDTH}} {position:<{POSITION_WIDTH}} {display_bitmap(docids)}"


def _prefix_position_line(key: Tuple[str, int], docids) -> str:
    prefix, position = key
    return f"{prefix:<{PREFIX_WIDTH}} {position:<{POSITION_WIDTH}} {display_bitmap(docids)}"


def _field_word_count_line(key: Tuple[int, int], docids) -> str:
    field_id, word_count = key
    return f"{field_id:<{FIELD_ID_WIDTH}} {word_count:<{WORD_COUNT_WIDTH}} {display_bitmap(docids)}"


def _facet_f64_line(key: Tuple[int, int, float, float], docids) -> str:
    field_id, level, low, high = key
    return (
        f"{field_id:<{FIELD_ID_WIDTH}} {level:<{LEVEL_WIDTH}} "
        f"{display_float(low):<{FACET_BOUND_WIDTH}} {display_float(high):<{FACET_BOUND_WIDTH}} "
        f"{display_bitmap(docids)}"
    )


def snap_documents_ids(txn: ReadTxn) -> str:
    return display_bitmap(txn.documents_ids())


def snap_soft_deleted_documents_ids(txn: ReadTxn) -> str:
    return display_bitmap(txn.soft_deleted_documents_ids())


def snap_geo_faceted_documents_ids(txn: ReadTxn) -> str:
    return display_bitmap(txn.geo_faceted_documents_ids())


def snap_stop_words(txn: ReadTxn) -> str:
    return debug_repr(txn.stop_words())


def snap_field_distribution(txn: ReadTxn) -> str:
    distribution = txn.field_distribution()
    return "".join(
        f"{field:<{FIELD_NAME_WIDTH}} {distribution[field]:<{DOCUMENT_COUNT_WIDTH}}\n"
        for field in sorted(distribution)
    )


def snap_fields_ids_map(txn: ReadTxn) -> str:
    fields = txn.fields_ids_map()
    return "".join(
        f"{field_id:<{FIELD_ID_WIDTH}} {fields[field_id]:<{FIELD_NAME_WIDTH}}\n"
        for field_id in sorted(fields)
    )


def snap_external_documents_ids(txn: ReadTxn) -> str:
    soft, hard = txn.external_documents_ids()
    return f"soft: {hex_dump(soft)}\nhard: {hex_dump(hard)}\n"


def snap_number_faceted_documents_ids(txn: ReadTxn) -> str:
    return "".join(
        f"{field_id:<{FIELD_ID_WIDTH}} {display_bitmap(txn.number_faceted_documents_ids(field_id))}\n"
        for field_id in sorted(txn.fields_ids_map())
    )


def snap_string_faceted_documents_ids(txn: ReadTxn) -> str:
    return "".join(
        f"{field_id:<{FIELD_ID_WIDTH}} {display_bitmap(txn.string_faceted_documents_ids(field_id))}\n"
        for field_id in sorted(txn.fields_ids_map())
    )


def snap_words_fst(txn: ReadTxn) -> str:
    return hex_dump(txn.words_fst())


def snap_words_prefixes_fst(txn: ReadTxn) -> str:
    return hex_dump(txn.words_prefixes_fst())


_str = StrCodec()
_roaring = RoaringBitmapCodec()
_cbo = CboRoaringBitmapCodec()

FORMATTERS: Dict[TableName, Formatter] = {
    TableName.SETTINGS: snap_settings,
    TableName.WORD_DOCIDS: table_formatter(TableName.WORD_DOCIDS, _str, _roaring, _word_line),
    TableName.EXACT_WORD_DOCIDS: table_formatter(TableName.EXACT_WORD_DOCIDS, _str, _roaring, _word_line),
    TableName.WORD_PREFIX_DOCIDS: table_formatter(TableName.WORD_PREFIX_DOCIDS, _str, _roaring, _word_line),
    TableName.EXACT_WORD_PREFIX_DOCIDS: table_formatter(
        TableName.EXACT_WORD_PREFIX_DOCIDS, _str, _roaring, _word_line
    ),
    TableName.DOCID_WORD_POSITIONS: table_formatter(
        TableName.DOCID_WORD_POSITIONS, BEU32StrCodec(), BoRoaringBitmapCodec(), _docid_word_line
    ),
    TableName.WORD_PAIR_PROXIMITY_DOCIDS: table_formatter(
        TableName.WORD_PAIR_PROXIMITY_DOCIDS, StrStrU8Codec(), _cbo, _word_pair_line
    ),
    TableName.WORD_PREFIX_PAIR_PROXIMITY_DOCIDS: table_formatter(
        TableName.WORD_PREFIX_PAIR_PROXIMITY_DOCIDS, StrStrU8Codec(), _cbo, _word_prefix_pair_line
    ),
    TableName.WORD_POSITION_DOCIDS: table_formatter(
        TableName.WORD_POSITION_DOCIDS, StrBEU32Codec(), _cbo, _word_position_line
    ),
    TableName.FIELD_ID_WORD_COUNT_DOCIDS: table_formatter(
        TableName.FIELD_ID_WORD_COUNT_DOCIDS, FieldIdWordCountCodec(), _cbo, _field_word_count_line
    ),
    TableName.WORD_PREFIX_POSITION_DOCIDS: table_formatter(
        TableName.WORD_PREFIX_POSITION_DOCIDS, StrBEU32Codec(), _cbo, _prefix_position_line
    ),
    TableName.FACET_ID_F64_DOCIDS: table_formatter(
        TableName.FACET_ID_F64_DOCIDS, FacetLevelValueF64Codec(), _cbo, _facet_f64_line
    ),
    TableName.FACET_ID_STRING_DOCIDS: snap_facet_id_string_docids,
    TableName.DOCUMENTS_IDS: snap_documents_ids,
    TableName.STOP_WORDS: snap_stop_words,
    TableName.SOFT_DELETED_DOCUMENTS_IDS: snap_soft_deleted_documents_ids,
    TableName.FIELD_DISTRIBUTION: snap_field_distribution,
    TableName.FIELDS_IDS_MAP: snap_fields_ids_map,
    TableName.GEO_FACETED_DOCUMENTS_IDS: snap_geo_faceted_documents_ids,
    TableName.EXTERNAL_DOCUMENTS_IDS: snap_external_documents_ids,
    TableName.NUMBER_FACETED_DOCUMENTS_IDS: snap_number_faceted_documents_ids,
    TableName.STRING_FACETED_DOCUMENTS_IDS: snap_string_faceted_documents_ids,
    TableName.WORDS_FST: snap_words_fst,
    TableName.WORDS_PREFIXES_FST: snap_words_prefixes_fst,
}


def resolve_table_name(name: Union[str, TableName]) -> TableName:
    """
    Look up a snapshot name.

    Raises:
        UnknownTableError: If no formatter is registered under that name
    """
    try:
        return TableName(name)
    except ValueError:
        raise UnknownTableError(str(name)) from None


def get_formatter(name: Union[str, TableName]) -> Formatter:
    return FORMATTERS[resolve_table_name(name)]


def full_snap_of_db(store: IndexStore, name: Union[str, TableName]) -> str:
    """
    Render the full content of one snapshot-able name.

    Opens a single read transaction for the duration of the rendering; the
    transaction is released even when decoding fails.

    Args:
        store: Store to read from
        name: Table or computed value to render

    Returns:
        The snapshot text

    Raises:
        UnknownTableError: If ``name`` is not snapshot-able
        MissingTableError: If the store lacks the backing table
        DecodeError: If any record fails to decode
    """
    table = resolve_table_name(name)
    formatter = FORMATTERS[table]
    with store.read_txn() as txn:
        snap = formatter(txn)
    logger.debug(f"Rendered snapshot of {len(snap)} characters", extra={"table": table.value})
    return snap
