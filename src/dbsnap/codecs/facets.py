"""
Codecs for facet tables.

Facet keys start with a u16 BE field id and a u8 level. Numeric facets
store f64 bounds; string facets store either a level-zero entry keyed by
the normalized string, or a leveled entry keyed by u32 group bounds. The
two string layouts share one table and are told apart only by the level
byte, so their key codecs raise ShapeMismatchError for the other layout.
"""

import struct
from typing import Optional, Tuple

from pyroaring import BitMap

from ..core.exceptions import DecodeError, ShapeMismatchError
from .base import (
    F64_BE,
    U16_BE,
    U32_BE,
    Codec,
    decode_utf8,
    read_u16,
    read_u32,
    split_at,
)
from .bitmaps import CboRoaringBitmapCodec


FACET_KEY_HEADER = struct.Struct(">HB")
U64_BE = struct.Struct(">Q")

_SIGN_BIT = 1 << 63
_U64_MASK = (1 << 64) - 1


def f64_into_ordered_bytes(value: float) -> bytes:
    """
    Encode a float so that bytewise order matches numeric order.

    Positive numbers get their sign bit flipped, negative numbers get every
    bit flipped. NaN has no place in that order and is rejected.
    """
    if value != value:
        raise ValueError("NaN cannot be encoded as an ordered facet value")
    bits = U64_BE.unpack(F64_BE.pack(value))[0]
    if bits & _SIGN_BIT:
        bits = ~bits & _U64_MASK
    else:
        bits |= _SIGN_BIT
    return U64_BE.pack(bits)


def _read_facet_header(data: bytes) -> Tuple[int, int, bytes]:
    header, rest = split_at(data, FACET_KEY_HEADER.size, "facet key header")
    field_id, level = FACET_KEY_HEADER.unpack(header)
    return field_id, level, rest


class FacetLevelValueF64Codec(Codec):
    """
    (field id, level, low, high) for numeric facets.

    Level zero holds a single value: ordered bytes then the BE f64.
    Higher levels hold a range: both ordered bounds, then both BE f64.
    Only the trailing BE floats are read back.
    """

    def decode(self, data: bytes) -> Tuple[int, int, float, float]:
        field_id, level, rest = _read_facet_header(data)
        if level == 0:
            if len(rest) != 16:
                raise DecodeError(f"level 0 numeric facet key has {len(rest)} value bytes, expected 16")
            low = F64_BE.unpack(rest[8:16])[0]
            return field_id, level, low, low
        if len(rest) != 32:
            raise DecodeError(f"leveled numeric facet key has {len(rest)} value bytes, expected 32")
        low = F64_BE.unpack(rest[16:24])[0]
        high = F64_BE.unpack(rest[24:32])[0]
        return field_id, level, low, high

    def encode(self, item: Tuple[int, int, float, float]) -> bytes:
        field_id, level, low, high = item
        header = FACET_KEY_HEADER.pack(field_id, level)
        if level == 0:
            return header + f64_into_ordered_bytes(low) + F64_BE.pack(low)
        return (
            header
            + f64_into_ordered_bytes(low)
            + f64_into_ordered_bytes(high)
            + F64_BE.pack(low)
            + F64_BE.pack(high)
        )


class FacetStringLevelZeroCodec(Codec):
    """(field id, normalized string) for level-zero string facet entries."""

    def decode(self, data: bytes) -> Tuple[int, str]:
        if len(data) < FACET_KEY_HEADER.size or data[2] != 0:
            raise ShapeMismatchError("not a level 0 string facet key")
        field_id, _level, rest = _read_facet_header(data)
        return field_id, decode_utf8(rest, "normalized facet string")

    def encode(self, item: Tuple[int, str]) -> bytes:
        field_id, normalized = item
        return FACET_KEY_HEADER.pack(field_id, 0) + normalized.encode("utf-8")


class FacetLevelValueU32Codec(Codec):
    """(field id, level, low, high) for leveled string facet groups."""

    KEY_SIZE = FACET_KEY_HEADER.size + 2 * U32_BE.size

    def decode(self, data: bytes) -> Tuple[int, int, int, int]:
        if len(data) < FACET_KEY_HEADER.size or data[2] == 0:
            raise ShapeMismatchError("not a leveled u32 facet key")
        if len(data) != self.KEY_SIZE:
            raise DecodeError(f"leveled u32 facet key has {len(data)} bytes, expected {self.KEY_SIZE}")
        field_id, level, rest = _read_facet_header(data)
        low, rest = read_u32(rest, "low bound")
        high, _ = read_u32(rest, "high bound")
        return field_id, level, low, high

    def encode(self, item: Tuple[int, int, int, int]) -> bytes:
        field_id, level, low, high = item
        if level == 0:
            raise ValueError("leveled u32 facet keys need a non-zero level")
        return FACET_KEY_HEADER.pack(field_id, level) + U32_BE.pack(low) + U32_BE.pack(high)


class FacetStringLevelZeroValueCodec(Codec):
    """(original string, docids): u16 BE length, string, CBO bitmap."""

    def __init__(self):
        self.bitmap_codec = CboRoaringBitmapCodec()

    def decode(self, data: bytes) -> Tuple[str, BitMap]:
        length, rest = read_u16(data, "original string length")
        original, rest = split_at(rest, length, "original string")
        return decode_utf8(original, "original facet string"), self.bitmap_codec.decode(rest)

    def encode(self, item: Tuple[str, BitMap]) -> bytes:
        original, docids = item
        encoded = original.encode("utf-8")
        return U16_BE.pack(len(encoded)) + encoded + self.bitmap_codec.encode(docids)


class FacetStringZeroBoundsValueCodec(Codec):
    """
    (optional string bounds, docids) for leveled string facet groups.

    A flag byte says whether the group carries its lowest and highest
    level-zero strings. Groups without bounds are valid records.
    """

    def __init__(self):
        self.bitmap_codec = CboRoaringBitmapCodec()

    def decode(self, data: bytes) -> Tuple[Optional[Tuple[str, str]], BitMap]:
        flag, rest = split_at(data, 1, "bounds flag")
        if flag == b"\x00":
            return None, self.bitmap_codec.decode(rest)
        if flag != b"\x01":
            raise DecodeError(f"invalid bounds flag {flag[0]:#04x}")
        low_len, rest = read_u16(rest, "low bound length")
        high_len, rest = read_u16(rest, "high bound length")
        low, rest = split_at(rest, low_len, "low bound")
        high, rest = split_at(rest, high_len, "high bound")
        bounds = (decode_utf8(low, "low bound"), decode_utf8(high, "high bound"))
        return bounds, self.bitmap_codec.decode(rest)

    def encode(self, item: Tuple[Optional[Tuple[str, str]], BitMap]) -> bytes:
        bounds, docids = item
        if bounds is None:
            return b"\x00" + self.bitmap_codec.encode(docids)
        low, high = (bound.encode("utf-8") for bound in bounds)
        return (
            b"\x01"
            + U16_BE.pack(len(low))
            + U16_BE.pack(len(high))
            + low
            + high
            + self.bitmap_codec.encode(docids)
        )
