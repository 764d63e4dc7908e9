"""
Codecs for word-index table keys.

Integers in keys are big-endian so that bytewise key order matches
numeric order.
"""

import struct
from typing import Tuple

from ..core.exceptions import DecodeError
from .base import (
    U16_BE,
    U32_BE,
    Codec,
    decode_utf8,
    expect_empty,
    read_u16,
    read_u32,
    split_at,
)


class StrCodec(Codec):
    """A bare UTF-8 string."""

    def decode(self, data: bytes) -> str:
        return decode_utf8(data, "string key")

    def encode(self, item: str) -> bytes:
        return item.encode("utf-8")


class BEU32StrCodec(Codec):
    """(document id, word): u32 BE followed by UTF-8."""

    def decode(self, data: bytes) -> Tuple[int, str]:
        docid, rest = read_u32(data, "document id")
        return docid, decode_utf8(rest, "word")

    def encode(self, item: Tuple[int, str]) -> bytes:
        docid, word = item
        return U32_BE.pack(docid) + word.encode("utf-8")


class StrStrU8Codec(Codec):
    """(word1, word2, proximity): UTF-8, NUL, UTF-8, then one byte."""

    def decode(self, data: bytes) -> Tuple[str, str, int]:
        if not data:
            raise DecodeError("empty word pair key")
        body, proximity = data[:-1], data[-1]
        separator = body.find(b"\x00")
        if separator == -1:
            raise DecodeError("word pair key has no separator")
        word1 = decode_utf8(body[:separator], "first word")
        word2 = decode_utf8(body[separator + 1:], "second word")
        return word1, word2, proximity

    def encode(self, item: Tuple[str, str, int]) -> bytes:
        word1, word2, proximity = item
        return word1.encode("utf-8") + b"\x00" + word2.encode("utf-8") + bytes([proximity])


class StrBEU32Codec(Codec):
    """(word, position): UTF-8 followed by a trailing u32 BE."""

    def decode(self, data: bytes) -> Tuple[str, int]:
        if len(data) < U32_BE.size:
            raise DecodeError(f"word position key too short: {len(data)} bytes")
        word_bytes, position_bytes = data[:-U32_BE.size], data[-U32_BE.size:]
        return decode_utf8(word_bytes, "word"), U32_BE.unpack(position_bytes)[0]

    def encode(self, item: Tuple[str, int]) -> bytes:
        word, position = item
        return word.encode("utf-8") + U32_BE.pack(position)


class FieldIdWordCountCodec(Codec):
    """(field id, word count): u16 BE followed by one byte."""

    def decode(self, data: bytes) -> Tuple[int, int]:
        field_id, rest = read_u16(data, "field id")
        count_bytes, rest = split_at(rest, 1, "word count")
        expect_empty(rest, "word count")
        return field_id, count_bytes[0]

    def encode(self, item: Tuple[int, int]) -> bytes:
        field_id, word_count = item
        return U16_BE.pack(field_id) + struct.pack(">B", word_count)
