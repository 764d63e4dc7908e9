from .config_loader import SnapshotConfig, load_config, parse_bool

__all__ = ["SnapshotConfig", "load_config", "parse_bool"]
