"""
Codecs for compressed sets of document ids.

Three encodings are in use:
- RoaringBitmapCodec: portable roaring serialization
- BoRoaringBitmapCodec: a raw array of little-endian u32
- CboRoaringBitmapCodec: the raw array for small sets, roaring otherwise
"""

import struct
from typing import Iterable

from pyroaring import BitMap

from ..core.exceptions import DecodeError
from .base import Codec


U32_LE_SIZE = 4

# Sets with at most this many members are stored as a raw u32 array.
CBO_THRESHOLD = 7


def _decode_u32_array(data: bytes) -> BitMap:
    if len(data) % U32_LE_SIZE != 0:
        raise DecodeError(f"u32 array length {len(data)} is not a multiple of 4")
    count = len(data) // U32_LE_SIZE
    return BitMap(struct.unpack(f"<{count}I", data))


def _encode_u32_array(docids: Iterable[int]) -> bytes:
    members = sorted(docids)
    return struct.pack(f"<{len(members)}I", *members)


def _deserialize_roaring(data: bytes) -> BitMap:
    try:
        return BitMap.deserialize(data)
    except (ValueError, OverflowError) as e:
        raise DecodeError(f"invalid roaring bitmap ({len(data)} bytes): {e}") from e


def _run_free(docids: Iterable[int]) -> BitMap:
    # Run containers would let a roaring set of more than CBO_THRESHOLD
    # members serialize within the raw array size.
    return BitMap(list(docids), optimize=False)


class RoaringBitmapCodec(Codec):
    """Portable roaring bitmap serialization."""

    def decode(self, data: bytes) -> BitMap:
        return _deserialize_roaring(data)

    def encode(self, item: Iterable[int]) -> bytes:
        return _run_free(item).serialize()


class BoRoaringBitmapCodec(Codec):
    """Bitmap stored as a plain array of little-endian u32."""

    def decode(self, data: bytes) -> BitMap:
        return _decode_u32_array(data)

    def encode(self, item: Iterable[int]) -> bytes:
        return _encode_u32_array(item)


class CboRoaringBitmapCodec(Codec):
    """
    Conditionally-serialized bitmap.

    Sets of at most CBO_THRESHOLD members are stored as a raw u32 array,
    larger ones as roaring. The decoder tells the two apart by byte length
    alone.
    """

    def decode(self, data: bytes) -> BitMap:
        if len(data) <= CBO_THRESHOLD * U32_LE_SIZE:
            return _decode_u32_array(data)
        return _deserialize_roaring(data)

    def encode(self, item: Iterable[int]) -> bytes:
        bitmap = _run_free(item)
        if len(bitmap) <= CBO_THRESHOLD:
            return _encode_u32_array(bitmap)
        return bitmap.serialize()
