"""
Configuration management for SiteCurator.

Settings are read from config.yaml and layered over DEFAULT_CONFIG, so a
file only needs the keys it changes. A missing or unreadable file leaves the
defaults in force.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_CONFIG: Dict[str, Any] = {
    "site": {
        "name": "NSCU University",
        "default_page_type": "standard",
    },
    "database": {
        "filename": "sitecurator.db",
    },
    "sync": {
        "transactional": False,
    },
    "paths": {
        "export_dir": "exports",
        "log_file": "sitecurator.log",
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """
    Loads SiteCurator settings and exposes them by dotted key.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the YAML settings file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        if not self.config_path.exists():
            logging.warning(f"No configuration at {self.config_path}, using defaults")
            self._config = copy.deepcopy(DEFAULT_CONFIG)
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError("top level must be a mapping")
        except (OSError, yaml.YAMLError, ValueError) as e:
            logging.error(f"Unreadable configuration {self.config_path}: {e}; using defaults")
            self._config = copy.deepcopy(DEFAULT_CONFIG)
            return

        self._config = _merge(DEFAULT_CONFIG, loaded)
        logging.info(f"Configuration loaded from {self.config_path}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Look up a value by dotted key, e.g. "sync.transactional".

        Returns default when any part of the path is missing.
        """
        value: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        return dict(self._config.get(section) or {})

    def reload(self) -> None:
        """Re-read the settings file."""
        self._load_config()

    @property
    def site_name(self) -> str:
        """Site name appended to generated page descriptions."""
        return self.get("site.name")

    @property
    def default_page_type(self) -> str:
        """Page type given to pages mirrored from navigation items."""
        return self.get("site.default_page_type")

    @property
    def database_filename(self) -> str:
        return self.get("database.filename")

    @property
    def transactional_sync(self) -> bool:
        """Whether a navigation write and its page write share one transaction."""
        return bool(self.get("sync.transactional"))

    @property
    def export_directory(self) -> str:
        return self.get("paths.export_dir")

    @property
    def log_filename(self) -> str:
        return self.get("paths.log_file")


config = ConfigManager()


def get_config() -> ConfigManager:
    """Return the process-wide configuration."""
    return config
