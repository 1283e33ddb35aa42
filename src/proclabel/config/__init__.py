"""
Configuration management for the proclabel package.

This module provides a clean interface for loading, validating, and accessing
configuration data from TOML files with singleton pattern management.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import load_main_config, load_toml_file
from .validators import validate_identifier_config, validate_monitor_config

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "clear_config_cache",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_identifier_config",
    "validate_monitor_config",
]
