"""
System interaction: external command execution and OS query capabilities.
"""

from .commands import CommandResult, is_command_available, run_command
from .lookups import (
    ContainerLookup,
    CwdLookup,
    DockerContainerLookup,
    LsofCwdLookup,
)

__all__ = [
    "CommandResult",
    "run_command",
    "is_command_available",
    "CwdLookup",
    "ContainerLookup",
    "LsofCwdLookup",
    "DockerContainerLookup",
]
