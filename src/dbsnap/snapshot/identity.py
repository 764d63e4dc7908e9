"""
Snapshot identity resolver.

Derives where a test's fixtures live from the test's source file, its id
and an optional case label. The calling harness passes all three in
explicitly; nothing here inspects the running test.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import SnapshotPathError


TEST_ID_SEPARATOR = "::"
FIXTURE_SUFFIX = ".snap"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SnapshotLocation:
    """
    Directory holding the fixtures of one test (or one case of a test).

    Attributes:
        directory: ``<root>/<relative source path>/<test name>[/<case>]``
        source_path: Source file path relative to the source root
        test_name: Innermost segment of the test id
        case_name: Optional case label
    """
    directory: Path
    source_path: Path
    test_name: str
    case_name: Optional[str] = None

    def fixture_path(self, name: str) -> Path:
        """Path of the fixture file for snapshot ``name``."""
        return self.directory / f"{name}{FIXTURE_SUFFIX}"

    def for_case(self, case_name: Optional[str]) -> "SnapshotLocation":
        """Location of a named case of this test, or self when unnamed."""
        if case_name is None:
            return self
        if self.case_name is not None:
            raise SnapshotPathError(
                f"Location of {self.test_name} already has case {self.case_name!r}"
            )
        return replace(self, directory=self.directory / case_name, case_name=case_name)


def name_from_test_id(test_id: str) -> str:
    """Return the innermost segment of a ``::``-separated test id."""
    name = test_id.rsplit(TEST_ID_SEPARATOR, 1)[-1]
    if not name:
        raise SnapshotPathError(f"Cannot derive a test name from {test_id!r}")
    return name


def relative_source_path(source_file: PathLike, source_root: PathLike) -> Path:
    """
    Strip ``source_root`` from ``source_file``.

    Raises:
        SnapshotPathError: If the file is not under the root
    """
    source_file = Path(source_file)
    source_root = Path(source_root)
    try:
        return source_file.relative_to(source_root)
    except ValueError:
        pass
    try:
        return Path(os.path.abspath(source_file)).relative_to(os.path.abspath(source_root))
    except ValueError:
        raise SnapshotPathError(
            f"Source file {source_file} is not under source root {source_root}"
        ) from None


def resolve_snapshot_location(
    source_file: PathLike,
    test_id: str,
    case_name: Optional[str] = None,
    source_root: PathLike = "tests",
    snapshot_root: PathLike = "snapshots",
) -> SnapshotLocation:
    """
    Compute the fixture location for a test.

    Args:
        source_file: File the test is defined in
        test_id: Test identifier, e.g. ``tests/test_x.py::TestY::test_z``
        case_name: Optional case label appended as a last directory
        source_root: Root stripped from ``source_file``
        snapshot_root: Directory under which all fixtures live

    Returns:
        SnapshotLocation for the test

    Example:
        >>> resolve_snapshot_location("tests/unit/test_a.py", "test_a.py::test_b", "first").directory
        PosixPath('snapshots/unit/test_a.py/test_b/first')
    """
    source_path = relative_source_path(source_file, source_root)
    test_name = name_from_test_id(test_id)
    location = SnapshotLocation(
        directory=Path(snapshot_root) / source_path / test_name,
        source_path=source_path,
        test_name=test_name,
    )
    return location.for_case(case_name)
