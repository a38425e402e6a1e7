"""Configuration package for the YKS tracker."""

from yks_tracker.config.app_config import (
    AppConfig,
    ConfigError,
    DashboardConfig,
    StorageConfig,
    load_app_config,
)
from yks_tracker.config.subjects import (
    CORRECT_POINTS,
    WRONG_PENALTY,
    ExamCategory,
    SubjectNode,
    TaxonomyError,
    get_subjects,
    load_subjects,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "DashboardConfig",
    "StorageConfig",
    "load_app_config",
    "CORRECT_POINTS",
    "WRONG_PENALTY",
    "ExamCategory",
    "SubjectNode",
    "TaxonomyError",
    "get_subjects",
    "load_subjects",
]
