"""설정 모듈."""

from src.tree_watch.config.settings import ConfigError, Settings, load_settings

__all__ = [
    "ConfigError",
    "Settings",
    "load_settings",
]
