"""
Process identification data models.

This module contains the input and output structures of the identification
engine: the raw query built from an OS process record, the labelled result
handed to the display layers, and the context passed to pattern rules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProcessCategory(str, Enum):
    """Closed set of categories a process label can carry."""

    WEB = "web"
    DATABASE = "database"
    TOOL = "tool"
    SERVICE = "service"
    APP = "app"
    SCRIPT = "script"
    SYSTEM = "system"
    CONTAINER = "container"


@dataclass(frozen=True)
class ContainerInfo:
    """A running container that publishes a host port."""

    name: str
    image: str


@dataclass
class ProcessQuery:
    """
    Input to identification, built from one process record per refresh tick.

    Attributes:
        pid: Process id.
        command: Full command line as reported by the OS.
        port: A listening TCP port owned by the process, if any.
        cwd: Working directory if the caller already knows it; resolved
            by the engine otherwise.
        ppid: Parent process id. Only used by batch identification to let
            children inherit the label of an identified parent.
    """

    pid: int
    command: str
    port: Optional[int] = None
    cwd: Optional[str] = None
    ppid: Optional[int] = None


@dataclass(frozen=True)
class IdentifiedProcess:
    """
    Labelled process, as consumed by the table renderer and dashboards.

    Instances are shared through the identification cache and therefore
    immutable; use ``dataclasses.replace`` to derive variants.
    """

    display_name: str
    category: ProcessCategory
    project: Optional[str] = None
    port: Optional[int] = None
    container_info: Optional[ContainerInfo] = None


@dataclass(frozen=True)
class ProcessContext:
    """Resolved context handed to pattern rules."""

    cwd: Optional[str] = None
    project_name: Optional[str] = None
    port: Optional[int] = None


def format_process_display(identified: IdentifiedProcess, port: Optional[int] = None) -> str:
    """Format a label for one table cell, appending the port when given.

    Examples:
        >>> format_process_display(IdentifiedProcess("vite:shop", ProcessCategory.WEB), 5173)
        'vite:shop:5173'
    """
    if port:
        return f"{identified.display_name}:{port}"
    return identified.display_name
