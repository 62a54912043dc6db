"""AppleVerse configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/appleverse/config.toml (user config)
4. /opt/appleverse/config.toml (production install)
5. /etc/appleverse/config.toml (system config)
"""

from appleverse.config.schema import (
    AppleverseConfig,
    DatabaseConfig,
    ImporterConfig,
    ServerConfig,
    StorageConfig,
)
from appleverse.config.settings import get_settings, reset_settings, settings

__all__ = [
    "AppleverseConfig",
    "DatabaseConfig",
    "ImporterConfig",
    "ServerConfig",
    "StorageConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
