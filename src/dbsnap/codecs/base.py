"""
Codec base class and byte-splitting helpers.

A codec turns the raw bytes of one key or value into a structured Python
value and back. Decoding never guesses: malformed input raises
DecodeError, and a well-formed input of a different record shape raises
ShapeMismatchError.
"""

import struct
from abc import ABC, abstractmethod
from typing import Any, Tuple

from ..core.exceptions import DecodeError


U16_BE = struct.Struct(">H")
U32_BE = struct.Struct(">I")
F64_BE = struct.Struct(">d")


class Codec(ABC):
    """Abstract base class for byte codecs."""

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """
        Decode raw bytes.

        Raises:
            DecodeError: If the bytes are malformed
        """
        pass

    @abstractmethod
    def encode(self, item: Any) -> bytes:
        """Encode a structured value into raw bytes."""
        pass


def split_at(data: bytes, index: int, what: str) -> Tuple[bytes, bytes]:
    """Split ``data`` at ``index``, failing when it is too short."""
    if len(data) < index:
        raise DecodeError(f"truncated {what}: need {index} bytes, have {len(data)}")
    return data[:index], data[index:]


def read_u16(data: bytes, what: str) -> Tuple[int, bytes]:
    head, rest = split_at(data, U16_BE.size, what)
    return U16_BE.unpack(head)[0], rest


def read_u32(data: bytes, what: str) -> Tuple[int, bytes]:
    head, rest = split_at(data, U32_BE.size, what)
    return U32_BE.unpack(head)[0], rest


def decode_utf8(data: bytes, what: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"invalid UTF-8 in {what}: {e}") from e


def expect_empty(rest: bytes, what: str) -> None:
    if rest:
        raise DecodeError(f"{len(rest)} trailing bytes after {what}")
