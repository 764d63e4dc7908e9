"""
Unit tests for the snapshot reducer.
"""

import hashlib

import pytest

from dbsnap.core.exceptions import ConfigError
from dbsnap.snapshot.reducer import (
    FILE_THRESHOLD,
    INLINE_THRESHOLD,
    SnapshotRecord,
    content_hash,
    convert_snap_to_hash_if_needed,
)


class TestContentHash:
    """Tests for content_hash."""

    def test_md5_hex(self):
        """Test the digest is lowercase md5 hex."""
        assert content_hash("") == "d41d8cd98f00b204e9800998ecf8427e"
        assert content_hash("hello") == hashlib.md5(b"hello").hexdigest()

    def test_single_character_change(self):
        """Test changing one character changes the digest."""
        assert content_hash("abc") != content_hash("abd")
        assert content_hash("[0, 1, ]") != content_hash("[0, 2, ]")

    def test_utf8_encoded(self):
        assert content_hash("é") == hashlib.md5("é".encode("utf-8")).hexdigest()


class TestThresholds:
    """Tests for the inline and file thresholds."""

    def test_inline_below_threshold_kept(self):
        snap = "a" * (INLINE_THRESHOLD - 1)
        records = convert_snap_to_hash_if_needed("word_docids", snap, inline=True, store_full=False)
        assert records == [SnapshotRecord("word_docids", snap)]

    def test_inline_at_threshold_hashed(self):
        snap = "a" * INLINE_THRESHOLD
        records = convert_snap_to_hash_if_needed("word_docids", snap, inline=True, store_full=False)
        assert records == [SnapshotRecord("word_docids.hash", content_hash(snap))]

    def test_file_below_threshold_kept(self):
        snap = "a" * (FILE_THRESHOLD - 1)
        records = convert_snap_to_hash_if_needed("word_docids", snap, inline=False, store_full=False)
        assert records == [SnapshotRecord("word_docids", snap)]

    def test_file_at_threshold_hashed(self):
        snap = "a" * FILE_THRESHOLD
        records = convert_snap_to_hash_if_needed("word_docids", snap, inline=False, store_full=False)
        assert [record.name for record in records] == ["word_docids.hash"]

    def test_inline_threshold_is_lower(self):
        """Test a snapshot can be kept in a file but hashed inline."""
        snap = "a" * 1000
        assert convert_snap_to_hash_if_needed("x", snap, inline=False, store_full=False)[0].name == "x"
        assert convert_snap_to_hash_if_needed("x", snap, inline=True, store_full=False)[0].name == "x.hash"

    def test_length_counts_characters(self):
        """Test the threshold compares characters, not encoded bytes."""
        snap = "é" * (INLINE_THRESHOLD - 1)
        records = convert_snap_to_hash_if_needed("x", snap, inline=True, store_full=False)
        assert records == [SnapshotRecord("x", snap)]

    def test_empty_snapshot(self):
        assert convert_snap_to_hash_if_needed("x", "", inline=True, store_full=False) == [
            SnapshotRecord("x", "")
        ]


class TestStoreFull:
    """Tests for keeping the full text of hashed snapshots."""

    def test_full_record_precedes_hash(self):
        """Test the full text record comes before the hash."""
        snap = "b" * FILE_THRESHOLD
        records = convert_snap_to_hash_if_needed("word_docids", snap, inline=False, store_full=True)

        assert records == [
            SnapshotRecord("word_docids.full", snap),
            SnapshotRecord("word_docids.hash", content_hash(snap)),
        ]
        assert records[0].is_full
        assert not records[1].is_full

    def test_small_snapshot_unaffected(self):
        """Test the override only matters for hashed snapshots."""
        records = convert_snap_to_hash_if_needed("x", "small", inline=True, store_full=True)
        assert records == [SnapshotRecord("x", "small")]

    def test_read_from_environment(self, clean_env):
        """Test the override is read from the environment when not given."""
        clean_env.setenv("DBSNAP_FULL_SNAPS", "true")
        records = convert_snap_to_hash_if_needed("x", "c" * FILE_THRESHOLD, inline=False)
        assert [record.name for record in records] == ["x.full", "x.hash"]

    def test_environment_false(self, clean_env):
        clean_env.setenv("DBSNAP_FULL_SNAPS", "FALSE")
        records = convert_snap_to_hash_if_needed("x", "c" * FILE_THRESHOLD, inline=False)
        assert [record.name for record in records] == ["x.hash"]

    def test_malformed_override_is_fatal(self, clean_env):
        """Test a value other than true/false raises ConfigError."""
        clean_env.setenv("DBSNAP_FULL_SNAPS", "yes")
        with pytest.raises(ConfigError):
            convert_snap_to_hash_if_needed("x", "small", inline=True)
