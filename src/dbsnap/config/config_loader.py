"""
Configuration loader for the snapshot harness.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..core.exceptions import ConfigError


logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "DBSNAP_CONFIG"
FULL_SNAPS_ENV = "DBSNAP_FULL_SNAPS"
UPDATE_SNAPS_ENV = "DBSNAP_UPDATE_SNAPSHOTS"
SNAPSHOT_ROOT_ENV = "DBSNAP_SNAPSHOT_ROOT"
SOURCE_ROOT_ENV = "DBSNAP_SOURCE_ROOT"


def parse_bool(value: Any, name: str) -> bool:
    """
    Parse a boolean configuration value.

    Only ``true`` and ``false`` are accepted (case-insensitive). Anything
    else is a configuration error rather than a silent default.

    Args:
        value: Raw value from YAML or the environment
        name: Setting name, used in the error message

    Raises:
        ConfigError: If the value is not a boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    logger.error(f"Invalid boolean for {name}: {value!r}")
    raise ConfigError(f"{name} must be 'true' or 'false', got {value!r}")


class SnapshotConfig:
    """
    Configuration for the snapshot harness.

    Loads an optional YAML file, fills in defaults and applies
    environment variable overrides.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (optional)
            environ: Environment mapping (defaults to os.environ)
        """
        self.environ = os.environ if environ is None else environ
        if config_path is None and self.environ.get(CONFIG_PATH_ENV):
            config_path = Path(self.environ[CONFIG_PATH_ENV])
        self.config_path = Path(config_path) if config_path else None
        self.config = self._default_config()
        if self.config_path:
            self._merge(self._load_config())
        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise ConfigError(f"Config file not found: {self.config_path}")

        logger.info(f"Loading config from: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config root must be a mapping: {self.config_path}")
        return config

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "snapshots": {
                "root": "snapshots",
                "source_root": "tests",
                "store_full": False,
                "update": False,
            },
        }

    def _merge(self, loaded: Dict[str, Any]) -> None:
        snapshots = loaded.get("snapshots") or {}
        if not isinstance(snapshots, dict):
            raise ConfigError("'snapshots' section must be a mapping")
        self.config["snapshots"].update(snapshots)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        snapshots = self.config["snapshots"]

        root = self.environ.get(SNAPSHOT_ROOT_ENV)
        if root:
            snapshots["root"] = root

        source_root = self.environ.get(SOURCE_ROOT_ENV)
        if source_root:
            snapshots["source_root"] = source_root

        if FULL_SNAPS_ENV in self.environ:
            snapshots["store_full"] = self.environ[FULL_SNAPS_ENV]

        if UPDATE_SNAPS_ENV in self.environ:
            snapshots["update"] = self.environ[UPDATE_SNAPS_ENV]

        # Validate eagerly so a bad value fails at harness start
        snapshots["store_full"] = parse_bool(snapshots["store_full"], FULL_SNAPS_ENV)
        snapshots["update"] = parse_bool(snapshots["update"], UPDATE_SNAPS_ENV)

    @property
    def snapshot_root(self) -> Path:
        """Directory holding fixture files."""
        return Path(self.config["snapshots"]["root"])

    @property
    def source_root(self) -> Path:
        """Prefix stripped from call-site paths before they become fixture paths."""
        return Path(self.config["snapshots"]["source_root"])

    @property
    def store_full(self) -> bool:
        """Whether oversized snapshots also keep their full text."""
        return self.config["snapshots"]["store_full"]

    @property
    def update(self) -> bool:
        """Whether mismatching or missing fixtures are rewritten."""
        return self.config["snapshots"]["update"]

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


def load_config(config_path: Optional[Path] = None) -> SnapshotConfig:
    """Load configuration from ``config_path``, ``$DBSNAP_CONFIG`` or defaults."""
    return SnapshotConfig(config_path)
