"""
pytest integration.

Registered through the ``pytest11`` entry point. Provides:

- ``db_snapshot_config``: the harness configuration, loaded once per session
- ``db_snapshot_location``: fixture location of the requesting test, derived
  from its file and node id
- ``db_snapshot``: a ``DbSnapshot`` bound to that location

Example:
    def test_indexing(db_snapshot, index_store):
        db_snapshot(index_store, "word_docids")
        db_snapshot(index_store, "documents_ids", inline="[0, 1, ]")
"""

from pathlib import Path

import pytest

from .config.config_loader import SnapshotConfig, load_config
from .snapshot.comparator import FileSnapshotComparator
from .snapshot.harness import DbSnapshot
from .snapshot.identity import SnapshotLocation, resolve_snapshot_location


UPDATE_OPTION = "--dbsnap-update"


def pytest_addoption(parser):
    group = parser.getgroup("dbsnap")
    group.addoption(
        UPDATE_OPTION,
        action="store_true",
        default=False,
        help="Rewrite missing or mismatching index snapshots instead of failing",
    )


def _anchor(path: Path, root: Path) -> Path:
    return path if path.is_absolute() else root / path


@pytest.fixture(scope="session")
def db_snapshot_config() -> SnapshotConfig:
    """Harness configuration (YAML file and environment overrides)."""
    return load_config()


@pytest.fixture
def db_snapshot_location(request, db_snapshot_config) -> SnapshotLocation:
    """Fixture location of the requesting test."""
    rootpath = Path(request.config.rootpath)
    return resolve_snapshot_location(
        source_file=Path(request.path),
        test_id=request.node.nodeid,
        source_root=_anchor(db_snapshot_config.source_root, rootpath),
        snapshot_root=_anchor(db_snapshot_config.snapshot_root, rootpath),
    )


@pytest.fixture
def db_snapshot(request, db_snapshot_config, db_snapshot_location) -> DbSnapshot:
    """Snapshot assertion bound to the requesting test."""
    update = db_snapshot_config.update or request.config.getoption(UPDATE_OPTION)
    return DbSnapshot(
        db_snapshot_location,
        FileSnapshotComparator(update=update),
        store_full=db_snapshot_config.store_full,
    )
