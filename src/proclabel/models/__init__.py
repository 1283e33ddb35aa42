"""
Data models for proclabel.

Configuration Models:
- Identification engine and resolver settings
- Monitor loop settings

Process Models:
- Queries built from raw process records
- Labelled results and the container information attached to them
- Context handed to pattern rules
"""

from .config import AppConfig, IdentifierConfig, MonitorConfig
from .process import (
    ContainerInfo,
    IdentifiedProcess,
    ProcessCategory,
    ProcessContext,
    ProcessQuery,
    format_process_display,
)

__all__ = [
    # Configuration
    "AppConfig",
    "IdentifierConfig",
    "MonitorConfig",
    # Process
    "ContainerInfo",
    "IdentifiedProcess",
    "ProcessCategory",
    "ProcessContext",
    "ProcessQuery",
    "format_process_display",
]
