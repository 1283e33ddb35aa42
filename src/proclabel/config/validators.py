"""
Configuration validation utilities.

This module turns the raw `[identifier]` and `[monitor]` tables of
config.toml into validated configuration objects.
"""

import logging
from typing import Any, Dict

from ..models.config import IdentifierConfig, MonitorConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _section(data: Dict[str, Any], name: str, parent: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"{parent}.{name} must be a table", field_name=f"{parent}.{name}", value=section
        )
    return section


def validate_identifier_config(identifier_data: Dict[str, Any]) -> IdentifierConfig:
    """
    Validate and create an IdentifierConfig from raw configuration data.

    Missing keys fall back to the IdentifierConfig defaults.

    Args:
        identifier_data: Raw `[identifier]` table from TOML

    Returns:
        Validated IdentifierConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = IdentifierConfig()
    cache_settings = _section(identifier_data, "cache", "identifier")
    resolver_settings = _section(identifier_data, "resolvers", "identifier")

    max_entries = validate_positive_integer(
        cache_settings.get("max_entries", defaults.max_entries),
        min_value=1,
        max_value=1_000_000,
        field_name="identifier.cache.max_entries",
    )
    ttl_seconds = validate_positive_float(
        cache_settings.get("ttl_seconds", defaults.ttl_seconds),
        min_value=0.1,
        max_value=3600.0,
        field_name="identifier.cache.ttl_seconds",
    )
    key_command_prefix = validate_positive_integer(
        cache_settings.get("key_command_prefix", defaults.key_command_prefix),
        min_value=8,
        max_value=4096,
        field_name="identifier.cache.key_command_prefix",
    )

    cwd_cache_ttl_seconds = validate_positive_float(
        resolver_settings.get("cwd_cache_ttl_seconds", defaults.cwd_cache_ttl_seconds),
        min_value=0.1,
        max_value=3600.0,
        field_name="identifier.resolvers.cwd_cache_ttl_seconds",
    )
    cwd_cache_max_entries = validate_positive_integer(
        resolver_settings.get("cwd_cache_max_entries", defaults.cwd_cache_max_entries),
        min_value=1,
        max_value=1_000_000,
        field_name="identifier.resolvers.cwd_cache_max_entries",
    )
    container_cache_ttl_seconds = validate_positive_float(
        resolver_settings.get(
            "container_cache_ttl_seconds", defaults.container_cache_ttl_seconds
        ),
        min_value=0.1,
        max_value=3600.0,
        field_name="identifier.resolvers.container_cache_ttl_seconds",
    )
    command_timeout_seconds = validate_positive_float(
        resolver_settings.get("command_timeout_seconds", defaults.command_timeout_seconds),
        min_value=0.1,
        max_value=60.0,
        field_name="identifier.resolvers.command_timeout_seconds",
    )
    lsof_command = validate_simple_command(
        resolver_settings.get("lsof_command", defaults.lsof_command),
        field_name="identifier.resolvers.lsof_command",
    )
    docker_command = validate_simple_command(
        resolver_settings.get("docker_command", defaults.docker_command),
        field_name="identifier.resolvers.docker_command",
    )

    if command_timeout_seconds > ttl_seconds:
        logger.warning(
            f"identifier.resolvers.command_timeout_seconds ({command_timeout_seconds}s) exceeds "
            f"identifier.cache.ttl_seconds ({ttl_seconds}s); labels may expire before they resolve."
        )

    return IdentifierConfig(
        max_entries=max_entries,
        ttl_seconds=ttl_seconds,
        key_command_prefix=key_command_prefix,
        cwd_cache_ttl_seconds=cwd_cache_ttl_seconds,
        cwd_cache_max_entries=cwd_cache_max_entries,
        container_cache_ttl_seconds=container_cache_ttl_seconds,
        command_timeout_seconds=command_timeout_seconds,
        lsof_command=lsof_command,
        docker_command=docker_command,
    )


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw `[monitor]` table from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = MonitorConfig()

    refresh_interval_seconds = validate_positive_float(
        monitor_data.get("refresh_interval_seconds", defaults.refresh_interval_seconds),
        min_value=0.5,
        max_value=300.0,
        field_name="monitor.refresh_interval_seconds",
    )
    log_level = validate_enum_choice(
        monitor_data.get("log_level", defaults.log_level),
        valid_choices=LOG_LEVELS,
        field_name="monitor.log_level",
        case_sensitive=False,
    )
    listening_only = validate_boolean(
        monitor_data.get("listening_only", defaults.listening_only),
        field_name="monitor.listening_only",
    )

    return MonitorConfig(
        refresh_interval_seconds=refresh_interval_seconds,
        log_level=log_level,
        listening_only=listening_only,
    )
