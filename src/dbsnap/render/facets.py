"""
Rendering of the string facet table.

The table holds two record layouts without a tag byte:
- level-zero entries: (field id, normalized string) -> (original string, docids)
- leveled groups: (field id, level, low, high) -> (optional bounds, docids)

Each record is decoded with the level-zero codec first. Only a clean shape
mismatch falls through to the leveled codec; a record matching neither is
fatal. The order matters: a key accepted by both codecs would render
differently depending on which is tried first, so it must never change.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from pyroaring import BitMap

from ..codecs.facets import (
    FacetLevelValueU32Codec,
    FacetStringLevelZeroCodec,
    FacetStringLevelZeroValueCodec,
    FacetStringZeroBoundsValueCodec,
)
from ..core.exceptions import DecodeError, ShapeMismatchError, UnknownRecordShapeError
from ..store.base import ReadTxn
from .primitives import display_bitmap


logger = logging.getLogger(__name__)

FACET_STRING_TABLE = "facet_id_string_docids"

FIELD_ID_WIDTH = 3
LEVEL_WIDTH = 2
GROUP_BOUND_WIDTH = 6
FACET_STRING_WIDTH = 8


@dataclass
class StringFacetLevelZeroEntry:
    """A single normalized facet string and the documents holding it."""
    field_id: int
    normalized: str
    original: str
    docids: BitMap

    def render(self) -> str:
        return (
            f"{self.field_id:<{FIELD_ID_WIDTH}} "
            f"{self.normalized:<{FACET_STRING_WIDTH}} "
            f"{self.original:<{FACET_STRING_WIDTH}} "
            f"{display_bitmap(self.docids)}"
        )


@dataclass
class StringFacetGroupEntry:
    """
    A group of level-zero entries at a higher level.

    ``bounds`` holds the lowest and highest strings of the group when the
    store recorded them; groups without bounds are a distinct, valid subtype.
    """
    field_id: int
    level: int
    low: int
    high: int
    bounds: Optional[Tuple[str, str]]
    docids: BitMap

    def render(self) -> str:
        line = (
            f"{self.field_id:<{FIELD_ID_WIDTH}} "
            f"{self.level:<{LEVEL_WIDTH}} "
            f"{self.low:<{GROUP_BOUND_WIDTH}} "
            f"{self.high:<{GROUP_BOUND_WIDTH}} "
        )
        if self.bounds is not None:
            low_bound, high_bound = self.bounds
            line += f"{low_bound:<{FACET_STRING_WIDTH}} {high_bound:<{FACET_STRING_WIDTH}} "
        return line + display_bitmap(self.docids)


StringFacetEntry = Union[StringFacetLevelZeroEntry, StringFacetGroupEntry]


class StringFacetDecoder:
    """Decodes raw string facet records, trying each layout in fixed order."""

    def __init__(self):
        self.level_zero_key = FacetStringLevelZeroCodec()
        self.level_zero_value = FacetStringLevelZeroValueCodec()
        self.group_key = FacetLevelValueU32Codec()
        self.group_value = FacetStringZeroBoundsValueCodec()

    def decode(self, key: bytes, value: bytes) -> StringFacetEntry:
        """
        Decode one raw record.

        Raises:
            UnknownRecordShapeError: If neither layout accepts the key
            DecodeError: If the matching layout finds the record corrupt
        """
        try:
            field_id, normalized = self.level_zero_key.decode(key)
        except ShapeMismatchError:
            pass
        else:
            original, docids = self.level_zero_value.decode(value)
            return StringFacetLevelZeroEntry(field_id, normalized, original, docids)

        try:
            field_id, level, low, high = self.group_key.decode(key)
        except ShapeMismatchError as e:
            raise UnknownRecordShapeError(
                "record matches neither the level 0 string nor the leveled u32 facet layout"
            ) from e
        bounds, docids = self.group_value.decode(value)
        return StringFacetGroupEntry(field_id, level, low, high, bounds, docids)


def snap_facet_id_string_docids(txn: ReadTxn) -> str:
    """Render every record of the string facet table, one per line."""
    decoder = StringFacetDecoder()
    lines = []
    for key, value in txn.iter_table(FACET_STRING_TABLE):
        try:
            entry = decoder.decode(key, value)
        except DecodeError as e:
            raise e.with_context(FACET_STRING_TABLE, key)
        lines.append(entry.render() + "\n")

    logger.debug(f"Rendered {len(lines)} string facet entries", extra={"table": FACET_STRING_TABLE})
    return "".join(lines)
