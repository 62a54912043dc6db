"""Configuration loader for AppleVerse.

Loads configuration from TOML files. Environment variables can override
any configuration value.
"""

import logging
import os
from pathlib import Path
from typing import Any

from appleverse.config.schema import AppleverseConfig

logger = logging.getLogger(__name__)

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/appleverse/config.toml (user config)
    3. /opt/appleverse/config.toml (production install)
    4. /etc/appleverse/config.toml (system config)
    """
    return [
        Path.cwd() / "config.toml",
        Path.home() / ".config" / "appleverse" / "config.toml",
        Path("/opt/appleverse/config.toml"),
        Path("/etc/appleverse/config.toml"),
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    for path in get_config_search_paths():
        if path.exists() and path.is_file():
            logger.debug(f"Found config file: {path}")
            return path
    return None


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = "APPLEVERSE") -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - APPLEVERSE_SERVER_HOST -> config_dict["server"]["host"]
    - APPLEVERSE_MONGODB_URL -> config_dict["database"]["mongodb_url"]
    - APPLEVERSE_DATA_DIR -> config_dict["storage"]["data_dir"]
    - etc.

    Note: This modifies config_dict in place.
    """
    env_mappings = {
        # Server
        f"{prefix}_SERVER_HOST": ("server", "host"),
        f"{prefix}_SERVER_PORT": ("server", "port"),
        f"{prefix}_SERVER_DEBUG": ("server", "debug"),
        f"{prefix}_DEBUG": ("server", "debug"),  # Shorthand
        # Database
        f"{prefix}_DATABASE_MONGODB_URL": ("database", "mongodb_url"),
        f"{prefix}_DATABASE_MONGODB_DATABASE": ("database", "mongodb_database"),
        f"{prefix}_MONGODB_URL": ("database", "mongodb_url"),  # Shorthand
        f"{prefix}_MONGODB_DATABASE": ("database", "mongodb_database"),  # Shorthand
        # Storage
        f"{prefix}_STORAGE_DATA_DIR": ("storage", "data_dir"),
        f"{prefix}_STORAGE_IMAGES_DIR": ("storage", "images_dir"),
        f"{prefix}_DATA_DIR": ("storage", "data_dir"),  # Shorthand
        f"{prefix}_IMAGES_DIR": ("storage", "images_dir"),  # Shorthand
        # Importer
        f"{prefix}_IMPORTER_BATCH_SIZE": ("importer", "batch_size"),
        f"{prefix}_IMPORT_BATCH_SIZE": ("importer", "batch_size"),  # Shorthand
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            section, key = path

            # Ensure section exists
            if section not in config_dict:
                config_dict[section] = {}

            # Convert value to appropriate type
            if key in ("port", "batch_size"):
                config_dict[section][key] = int(value)
            elif key == "debug":
                config_dict[section][key] = value.lower() in ("true", "1", "yes")
            else:
                config_dict[section][key] = value


def load_config(config_file: Path | None = None) -> AppleverseConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        AppleverseConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info(f"Loading config from: {config_file}")
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return AppleverseConfig(**config_dict)
