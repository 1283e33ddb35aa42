"""
Configuration data models.

This module contains the configuration structures for the identification
engine and the monitor loop, loaded from `config.toml`.
"""

from dataclasses import dataclass, field


@dataclass
class IdentifierConfig:
    """
    Settings of the identification engine and its resolvers.
    """

    # [identifier.cache]
    # Maximum number of labelled processes kept in the identification cache.
    max_entries: int = 1000
    # How long a label stays fresh, in seconds.
    ttl_seconds: float = 10.0
    # Number of command-line characters that take part in the cache key.
    key_command_prefix: int = 50

    # [identifier.resolvers]
    cwd_cache_ttl_seconds: float = 30.0
    cwd_cache_max_entries: int = 4096
    container_cache_ttl_seconds: float = 30.0
    # Upper bound for a single lsof / docker invocation.
    command_timeout_seconds: float = 3.0
    lsof_command: str = "lsof"
    docker_command: str = "docker"


@dataclass
class MonitorConfig:
    """
    Settings of the refresh loop driven by the CLI.
    """

    refresh_interval_seconds: float = 2.0
    log_level: str = "INFO"
    # Only show processes that own a listening port.
    listening_only: bool = True


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    identifier: IdentifierConfig = field(default_factory=IdentifierConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
