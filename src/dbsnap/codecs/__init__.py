"""
Byte codecs for the tables of the search index store.
"""

from .base import Codec
from .bitmaps import BoRoaringBitmapCodec, CboRoaringBitmapCodec, RoaringBitmapCodec
from .facets import (
    FacetLevelValueF64Codec,
    FacetLevelValueU32Codec,
    FacetStringLevelZeroCodec,
    FacetStringLevelZeroValueCodec,
    FacetStringZeroBoundsValueCodec,
    f64_into_ordered_bytes,
)
from .keys import (
    BEU32StrCodec,
    FieldIdWordCountCodec,
    StrBEU32Codec,
    StrCodec,
    StrStrU8Codec,
)

__all__ = [
    "Codec",
    "BoRoaringBitmapCodec",
    "CboRoaringBitmapCodec",
    "RoaringBitmapCodec",
    "FacetLevelValueF64Codec",
    "FacetLevelValueU32Codec",
    "FacetStringLevelZeroCodec",
    "FacetStringLevelZeroValueCodec",
    "FacetStringZeroBoundsValueCodec",
    "f64_into_ordered_bytes",
    "BEU32StrCodec",
    "FieldIdWordCountCodec",
    "StrBEU32Codec",
    "StrCodec",
    "StrStrU8Codec",
]
