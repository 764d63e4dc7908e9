"""
Fixture comparison.

File fixtures live at ``<location.directory>/<name>.snap``. A missing or
mismatching fixture fails the test and leaves the new content next to it
as ``<name>.snap.new``, unless update mode is on, in which case the
fixture is rewritten and the comparison passes.
"""

import difflib
import logging
import textwrap
from abc import ABC, abstractmethod
from pathlib import Path

from ..core.exceptions import SnapshotMismatchError
from .identity import SnapshotLocation


logger = logging.getLogger(__name__)

NEW_SUFFIX = ".new"


def _diff(expected: str, actual: str, name: str) -> str:
    lines = difflib.unified_diff(
        expected.splitlines(keepends=True),
        actual.splitlines(keepends=True),
        fromfile=f"{name} (stored)",
        tofile=f"{name} (rendered)",
    )
    return "".join(lines)


def normalize_inline(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


def assert_inline_snapshot(content: str, expected: str, name: str = "inline") -> None:
    """
    Compare rendered content against a literal written in the test.

    The literal is dedented, and leading and trailing newlines are ignored
    on both sides, so it can be written as an indented triple-quoted string.

    Raises:
        SnapshotMismatchError: If the two differ
    """
    actual_text = content.strip("\n")
    expected_text = normalize_inline(expected)
    if actual_text != expected_text:
        diff = _diff(expected_text + "\n", actual_text + "\n", name)
        raise SnapshotMismatchError(name, f"Inline snapshot mismatch:\n{diff}")


class SnapshotComparator(ABC):
    """Compares named snapshot content against stored fixtures."""

    @abstractmethod
    def assert_snapshot(self, location: SnapshotLocation, name: str, content: str) -> None:
        """
        Compare ``content`` with the fixture ``name`` at ``location``.

        Raises:
            SnapshotMismatchError: If the fixture is missing or differs
        """
        pass


class FileSnapshotComparator(SnapshotComparator):
    """Compares snapshots against ``.snap`` files on disk."""

    def __init__(self, update: bool = False):
        """
        Args:
            update: Rewrite missing or mismatching fixtures instead of failing
        """
        self.update = update

    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    def assert_snapshot(self, location: SnapshotLocation, name: str, content: str) -> None:
        path = location.fixture_path(name)
        pending = path.with_name(path.name + NEW_SUFFIX)

        if not path.exists():
            if self.update:
                self._write(path, content)
                logger.info(f"Created snapshot {path}", extra={"snapshot": name})
                return
            self._write(pending, content)
            raise SnapshotMismatchError(
                name,
                f"Missing snapshot {path}; rendered content written to {pending}",
            )

        with open(path, "r", encoding="utf-8", newline="") as f:
            stored = f.read()

        if stored == content:
            if pending.exists():
                pending.unlink()
            return

        if self.update:
            self._write(path, content)
            logger.info(f"Updated snapshot {path}", extra={"snapshot": name})
            return

        self._write(pending, content)
        raise SnapshotMismatchError(
            name,
            f"Snapshot {path} does not match:\n{_diff(stored, content, name)}",
        )
