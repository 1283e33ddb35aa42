"""
proclabel: human-readable labels for running processes.

This package turns raw process records (pid, command line, listening port)
into short labels such as ``next:shop``, ``npm:dev`` or ``docker:db`` for
live process monitors.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- cache: TTL/LRU cache and in-flight de-duplication
- system: External command execution (lsof, docker)
- resolvers: Working-directory, container and project-name resolution
- patterns: Ordered command-line classification rules
- identification: The identification engine
- collectors: psutil process snapshots
- cli: Command-line interface

Usage:
    From command line:
        proclabel process
        python -m proclabel monitor --interval 1

    Programmatically:
        from proclabel import IdentificationEngine, ProcessQuery
        engine = IdentificationEngine()
        label = await engine.identify(ProcessQuery(pid=1234, command="npm run dev", port=3000))
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .identification import IdentificationEngine
from .patterns import PatternMatcher
from .collectors import collect_process_queries
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    ContainerInfo,
    IdentifiedProcess,
    IdentifierConfig,
    MonitorConfig,
    ProcessCategory,
    ProcessContext,
    ProcessQuery,
    format_process_display,
)

__version__ = "0.1.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "IdentificationEngine",
    "PatternMatcher",
    "collect_process_queries",
    "main_cli",
    # Models
    "AppConfig",
    "IdentifierConfig",
    "MonitorConfig",
    "ContainerInfo",
    "IdentifiedProcess",
    "ProcessCategory",
    "ProcessContext",
    "ProcessQuery",
    "format_process_display",
]
