"""
Canonical text forms for the values found in snapshots.

These forms are part of the fixture format: changing any of them
invalidates every stored snapshot that contains such a value.
"""

import json
import math
from collections.abc import Mapping, Set
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable


def display_bitmap(docids: Iterable[int]) -> str:
    """
    Render a set of document ids in ascending order.

    Every member is followed by ``", "``, including the last one:
    ``{1, 5, 9}`` renders as ``[1, 5, 9, ]`` and the empty set as ``[]``.
    """
    parts = ["["]
    for docid in sorted(docids):
        parts.append(f"{docid}, ")
    parts.append("]")
    return "".join(parts)


def hex_dump(data: bytes) -> str:
    """Render raw bytes as two lowercase hex digits per byte, no separators."""
    return bytes(data).hex()


def display_float(value: float) -> str:
    """
    Render a float without exponent and without a trailing ``.0``.

    Uses the shortest digits that round-trip, so ``1.0`` renders as ``1``,
    ``0.5`` as ``0.5`` and ``1e21`` as ``1000000000000000000000``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def debug_repr(value: Any) -> str:
    """
    Render a setting value in a stable, deterministic form.

    - None renders as ``None``
    - strings are double-quoted with JSON escapes
    - booleans render as ``true`` / ``false``
    - lists and tuples keep their order: ``[a, b]``
    - sets are sorted: ``{a, b}``
    - mappings are sorted by key: ``{k: v}``
    """
    if value is None:
        return "None"
    if isinstance(value, Enum):
        return debug_repr(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return display_float(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (bytes, bytearray)):
        return hex_dump(value)
    if isinstance(value, Mapping):
        keys = _sorted_members(value.keys())
        return "{" + ", ".join(f"{debug_repr(k)}: {debug_repr(value[k])}" for k in keys) + "}"
    if isinstance(value, Set):
        return "{" + ", ".join(debug_repr(item) for item in _sorted_members(value)) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(debug_repr(item) for item in value) + "]"
    if hasattr(value, "to_dict"):
        return debug_repr(value.to_dict())
    # Sorted containers such as bitmaps iterate deterministically
    if hasattr(value, "__iter__"):
        return "[" + ", ".join(debug_repr(item) for item in value) + "]"
    return str(value)


def _sorted_members(members: Iterable[Any]) -> list:
    """Sort by natural order, or by rendered form when types do not compare."""
    members = list(members)
    try:
        return sorted(members)
    except TypeError:
        return sorted(members, key=debug_repr)
