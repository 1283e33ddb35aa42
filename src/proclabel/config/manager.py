"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import ValidationError, handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_identifier_config, validate_monitor_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

# This global variable will hold the single instance of the loaded AppConfig.
_CONFIG: Optional[AppConfig] = None

# Default path of the main configuration file, relative to this module.
# Overridden by set_config_path() (tests, the CLI --config option).
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Unlike the default path, an explicitly set path must exist when the
    configuration is loaded.

    Args:
        config_path: Path to the main config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = config_path
    # Clear cached config to force reload with new path
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> AppConfig:
    """
    Load the complete application configuration from a TOML file.

    Args:
        config_path: Path to the main config.toml file

    Returns:
        Fully validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly configured file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using built-in defaults")
        return AppConfig()

    try:
        main_config_data = load_main_config(config_path)

        identifier_config = validate_identifier_config(main_config_data.get("identifier", {}))
        monitor_config = validate_monitor_config(main_config_data.get("monitor", {}))

        app_config = AppConfig(identifier=identifier_config, monitor=monitor_config)
        logger.info(
            f"Successfully loaded configuration (cache: {identifier_config.max_entries} entries, "
            f"ttl {identifier_config.ttl_seconds}s)"
        )
        return app_config

    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    The first call loads and validates the configuration file; subsequent
    calls return the cached instance.

    Returns:
        The singleton AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly configured file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG
