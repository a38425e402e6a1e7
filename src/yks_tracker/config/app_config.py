"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from yks_tracker.config.app_config import load_app_config

    config = load_app_config()
    print(config.storage.backend, config.storage.path)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

STORAGE_BACKENDS = ("json", "sqlite", "memory")


class ConfigError(Exception):
    """Invalid application configuration."""

    pass


@dataclass
class StorageConfig:
    """Where and how the exam history blob is persisted."""

    backend: str = "json"
    path: str = "data/state/yks_exams.json"
    key: str = "yks_exams"


@dataclass
class DashboardConfig:
    """Defaults for the dashboard summary."""

    recent_count: int = 4
    label_length: int = 10


@dataclass
class AppConfig:
    """Application-wide configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    paths: dict[str, str] = field(default_factory=dict)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "storage": {
            "backend": "json",
            "path": "data/state/yks_exams.json",
            "key": "yks_exams",
        },
        "dashboard": {
            "recent_count": 4,
            "label_length": 10,
        },
        "paths": {
            "state_dir": "data/state",
            "config_dir": "data/config",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    storage_data = data.get("storage") or {}
    storage = StorageConfig(
        backend=storage_data.get("backend", "json"),
        path=storage_data.get("path", "data/state/yks_exams.json"),
        key=storage_data.get("key", "yks_exams"),
    )
    if storage.backend not in STORAGE_BACKENDS:
        raise ConfigError(
            f"Unknown storage backend '{storage.backend}' "
            f"(expected one of: {', '.join(STORAGE_BACKENDS)})"
        )

    dashboard_data = data.get("dashboard") or {}
    dashboard = DashboardConfig(
        recent_count=int(dashboard_data.get("recent_count", 4)),
        label_length=int(dashboard_data.get("label_length", 10)),
    )
    if dashboard.recent_count < 1:
        raise ConfigError("dashboard.recent_count must be at least 1")

    paths = data.get("paths") or {}

    return AppConfig(storage=storage, dashboard=dashboard, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If the file defines invalid values.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
