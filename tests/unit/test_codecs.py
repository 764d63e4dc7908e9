"""
Unit tests for the byte codecs.

Tests for:
- Bitmap codecs (roaring, raw array, conditional)
- Word-index key codecs
- Facet key and value codecs, including shape mismatches
"""

import struct

import pytest
from pyroaring import BitMap

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
    f64_into_ordered_bytes,
)
from dbsnap.codecs.bitmaps import CBO_THRESHOLD
from dbsnap.core.exceptions import DecodeError, ShapeMismatchError


class TestBitmapCodecs:
    """Tests for the document id set codecs."""

    def test_bo_roaring_is_little_endian_array(self):
        """Test the raw array layout."""
        data = BoRoaringBitmapCodec().encode([3, 1])
        assert data == struct.pack("<2I", 1, 3)
        assert list(BoRoaringBitmapCodec().decode(data)) == [1, 3]

    def test_bo_roaring_rejects_partial_integer(self):
        """Test a length that is not a multiple of four."""
        with pytest.raises(DecodeError):
            BoRoaringBitmapCodec().decode(b"\x01\x00\x00")

    def test_roaring_decodes_portable_format(self):
        """Test decoding a serialized roaring bitmap."""
        data = BitMap([1, 5, 9]).serialize()
        assert list(RoaringBitmapCodec().decode(data)) == [1, 5, 9]

    def test_roaring_rejects_garbage(self):
        """Test corrupt roaring bytes raise DecodeError."""
        with pytest.raises(DecodeError):
            RoaringBitmapCodec().decode(b"\xff\xff\xff\xff\xff")

    def test_cbo_small_set_is_raw_array(self):
        """Test sets up to the threshold use the raw array."""
        members = [2, 4, 6, 8, 10, 12, 14]
        assert len(members) == CBO_THRESHOLD

        data = CboRoaringBitmapCodec().encode(members)

        assert data == struct.pack(f"<{CBO_THRESHOLD}I", *members)
        assert list(CboRoaringBitmapCodec().decode(data)) == members

    def test_cbo_large_set_is_roaring(self):
        """Test sets above the threshold use roaring."""
        members = [2, 4, 6, 8, 10, 12, 14, 16]

        data = CboRoaringBitmapCodec().encode(members)

        assert len(data) > CBO_THRESHOLD * 4
        assert list(BitMap.deserialize(data)) == members
        assert list(CboRoaringBitmapCodec().decode(data)) == members

    @pytest.mark.parametrize("count", [8, 9, 12, 20, 100, 5000])
    def test_cbo_consecutive_members_round_trip(self, count):
        """Test runs of consecutive docids stay readable above the threshold."""
        members = list(range(count))

        data = CboRoaringBitmapCodec().encode(members)

        assert len(data) > CBO_THRESHOLD * 4
        assert list(CboRoaringBitmapCodec().decode(data)) == members

    def test_cbo_consecutive_bitmap_input(self):
        """Test a run-optimized bitmap input is re-encoded without runs."""
        members = BitMap(range(10, 30))
        members.run_optimize()

        data = CboRoaringBitmapCodec().encode(members)

        assert list(CboRoaringBitmapCodec().decode(data)) == list(range(10, 30))

    def test_roaring_consecutive_members_round_trip(self):
        data = RoaringBitmapCodec().encode(range(100))
        assert list(RoaringBitmapCodec().decode(data)) == list(range(100))

    def test_cbo_empty(self):
        """Test the empty set encodes to no bytes."""
        assert CboRoaringBitmapCodec().encode([]) == b""
        assert len(CboRoaringBitmapCodec().decode(b"")) == 0


class TestKeyCodecs:
    """Tests for the word-index key codecs."""

    def test_str(self):
        """Test a plain UTF-8 key."""
        assert StrCodec().decode("héllo".encode("utf-8")) == "héllo"

    def test_str_invalid_utf8(self):
        """Test invalid UTF-8 raises DecodeError."""
        with pytest.raises(DecodeError):
            StrCodec().decode(b"\xff\xfe")

    def test_docid_word(self):
        """Test (docid, word) keys are big-endian docid first."""
        data = BEU32StrCodec().encode((258, "hi"))
        assert data == b"\x00\x00\x01\x02hi"
        assert BEU32StrCodec().decode(data) == (258, "hi")

    def test_docid_word_truncated(self):
        """Test a key shorter than the docid."""
        with pytest.raises(DecodeError):
            BEU32StrCodec().decode(b"\x00\x01")

    def test_word_pair(self):
        """Test the NUL-separated word pair layout."""
        data = b"hello\x00world\x03"
        assert StrStrU8Codec().decode(data) == ("hello", "world", 3)
        assert StrStrU8Codec().encode(("hello", "world", 3)) == data

    def test_word_pair_without_separator(self):
        """Test a pair key without a separator."""
        with pytest.raises(DecodeError):
            StrStrU8Codec().decode(b"helloworld\x01")

    def test_word_position(self):
        """Test the trailing big-endian position."""
        data = StrBEU32Codec().encode(("hello", 7))
        assert data == b"hello\x00\x00\x00\x07"
        assert StrBEU32Codec().decode(data) == ("hello", 7)

    def test_field_word_count(self):
        """Test (field id, word count) keys."""
        assert FieldIdWordCountCodec().decode(b"\x00\x02\x05") == (2, 5)

    def test_field_word_count_trailing_bytes(self):
        """Test trailing bytes are rejected."""
        with pytest.raises(DecodeError):
            FieldIdWordCountCodec().decode(b"\x00\x02\x05\x00")


class TestFacetCodecs:
    """Tests for the facet key and value codecs."""

    def test_ordered_bytes_follow_numeric_order(self):
        """Test ordered float bytes sort like the numbers."""
        values = [-10.5, -1.0, -0.0, 0.0, 0.25, 3.0, 1e10]
        encoded = [f64_into_ordered_bytes(v) for v in values]
        assert encoded == sorted(encoded)

    def test_ordered_bytes_reject_nan(self):
        """Test NaN has no ordered encoding."""
        with pytest.raises(ValueError):
            f64_into_ordered_bytes(float("nan"))

    def test_f64_level_zero(self):
        """Test level 0 keys hold a single value."""
        codec = FacetLevelValueF64Codec()
        data = codec.encode((1, 0, 3.0, 3.0))
        assert len(data) == 3 + 16
        assert codec.decode(data) == (1, 0, 3.0, 3.0)

    def test_f64_leveled(self):
        """Test leveled keys hold a range."""
        codec = FacetLevelValueF64Codec()
        data = codec.encode((1, 2, -1.5, 8.0))
        assert len(data) == 3 + 32
        assert codec.decode(data) == (1, 2, -1.5, 8.0)

    def test_f64_wrong_length(self):
        """Test a level 0 key with the leveled payload size."""
        codec = FacetLevelValueF64Codec()
        data = codec.encode((1, 2, -1.5, 8.0))
        corrupted = data[:2] + b"\x00" + data[3:]
        with pytest.raises(DecodeError):
            codec.decode(corrupted)

    def test_string_level_zero(self):
        """Test level 0 string keys."""
        codec = FacetStringLevelZeroCodec()
        assert codec.decode(b"\x00\x01\x00blue") == (1, "blue")

    def test_string_level_zero_rejects_leveled_key(self):
        """Test a non-zero level is a shape mismatch, not corruption."""
        with pytest.raises(ShapeMismatchError):
            FacetStringLevelZeroCodec().decode(b"\x00\x01\x01\x00\x00\x00\x00\x00\x00\x00\x01")

    def test_u32_group(self):
        """Test leveled u32 keys."""
        codec = FacetLevelValueU32Codec()
        data = codec.encode((1, 1, 0, 4))
        assert data == b"\x00\x01\x01\x00\x00\x00\x00\x00\x00\x00\x04"
        assert codec.decode(data) == (1, 1, 0, 4)

    def test_u32_group_rejects_level_zero(self):
        """Test level 0 is a shape mismatch for the group codec."""
        with pytest.raises(ShapeMismatchError):
            FacetLevelValueU32Codec().decode(b"\x00\x01\x00blue")

    def test_u32_group_wrong_size(self):
        """Test a leveled key of the wrong size is corrupt."""
        with pytest.raises(DecodeError) as exc_info:
            FacetLevelValueU32Codec().decode(b"\x00\x01\x01\x00\x00")
        assert not isinstance(exc_info.value, ShapeMismatchError)

    def test_short_key_mismatches_both_layouts(self):
        """Test a key shorter than the header matches neither layout."""
        with pytest.raises(ShapeMismatchError):
            FacetStringLevelZeroCodec().decode(b"\x00")
        with pytest.raises(ShapeMismatchError):
            FacetLevelValueU32Codec().decode(b"\x00")

    def test_level_zero_value(self):
        """Test the original string and docids of a level 0 entry."""
        codec = FacetStringLevelZeroValueCodec()
        data = codec.encode(("Blue", [0, 3]))
        assert data[:2] == b"\x00\x04"
        original, docids = codec.decode(data)
        assert original == "Blue"
        assert list(docids) == [0, 3]

    def test_bounds_value_with_bounds(self):
        """Test group values carrying string bounds."""
        codec = FacetStringZeroBoundsValueCodec()
        bounds, docids = codec.decode(codec.encode((("blue", "red"), [1])))
        assert bounds == ("blue", "red")
        assert list(docids) == [1]

    def test_bounds_value_without_bounds(self):
        """Test group values without bounds are valid."""
        codec = FacetStringZeroBoundsValueCodec()
        bounds, docids = codec.decode(b"\x00" + struct.pack("<I", 2))
        assert bounds is None
        assert list(docids) == [2]

    def test_bounds_value_invalid_flag(self):
        """Test an unknown flag byte."""
        with pytest.raises(DecodeError):
            FacetStringZeroBoundsValueCodec().decode(b"\x02")
