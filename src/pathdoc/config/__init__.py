"""
Configuration module for pathdoc.

Uses pydantic-settings for environment variable loading.
"""

from pathdoc.config.settings import Settings, find_project_root
from pathdoc.config.sources import LayeredYamlSettingsSource
from pathdoc.config.types import (
    BackendConfig,
    ConfigBase,
    LoggingConfig,
    StoreConfig,
    TableConfig,
)

__all__ = [
    "BackendConfig",
    "ConfigBase",
    "LayeredYamlSettingsSource",
    "LoggingConfig",
    "Settings",
    "StoreConfig",
    "TableConfig",
    "find_project_root",
]
