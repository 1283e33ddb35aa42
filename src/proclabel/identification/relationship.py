"""
Label inheritance between a parent process and its children.

When ``npm run dev`` spawns ``next-server``, the child is part of the same
unit of work; showing it under the parent's label keeps the table readable.
"""

import re
from dataclasses import replace

from ..models import IdentifiedProcess, ProcessQuery
from ..patterns import executable_basename

_DEV_TOOLS = re.compile(r"\b(npm|yarn|pnpm|bun|vercel|nx|turbo|next|vite|webpack)")
_DEV_SERVERS = re.compile(r"\b(next-server|webpack|vite|nodemon|ts-node|dev-server|serve)")
_SHELLS = re.compile(r"\b(sh|bash|zsh|fish|csh|tcsh)$")
_RUNTIMES = re.compile(r"\b(node|bun|python|python3|ruby|php|deno)")
_CHILD_PROJECT = re.compile(r"/([^/]+)/(dist|src|bin|lib|build|out)/")

# Children that are the parent's own server keep the parent's label as-is.
_TRANSPARENT_CHILDREN = ("next-server", "webpack", "vite", "nodemon")


def is_development_tool_chain(parent_cmd: str, child_cmd: str) -> bool:
    """npm -> next-server, vercel -> webpack and similar chains."""
    return bool(_DEV_TOOLS.search(parent_cmd) and _DEV_SERVERS.search(child_cmd))


def is_same_project(child_cmd: str, parent_project: str) -> bool:
    child_project = _CHILD_PROJECT.search(child_cmd)
    if child_project and child_project.group(1) == parent_project:
        return True
    return re.search(f"/{re.escape(parent_project)}/", child_cmd, re.IGNORECASE) is not None


def is_script_execution_chain(parent_cmd: str, child_cmd: str) -> bool:
    """shell -> runtime/script, or runtime -> script with a clear path."""
    if _SHELLS.search(parent_cmd) and (_RUNTIMES.search(child_cmd) or "/" in child_cmd):
        return True
    if _RUNTIMES.search(parent_cmd) and "/" in child_cmd and "." in child_cmd:
        return True
    return False


def should_inherit(
    child: ProcessQuery, parent: ProcessQuery, parent_identity: IdentifiedProcess
) -> bool:
    """Decide whether ``child`` is shown under its parent's label."""
    parent_cmd = parent.command.lower()
    child_cmd = child.command.lower()

    if is_development_tool_chain(parent_cmd, child_cmd):
        return True
    if parent_identity.project and is_same_project(child.command, parent_identity.project):
        return True
    return is_script_execution_chain(parent_cmd, child_cmd)


def inherit_identity(parent_identity: IdentifiedProcess, child: ProcessQuery) -> IdentifiedProcess:
    """Derive the child's label from its parent's.

    Dev servers keep the parent's name; other children are shown as
    ``parent->child``. The child's own port is kept either way.
    """
    if any(server in child.command.lower() for server in _TRANSPARENT_CHILDREN):
        return replace(parent_identity, port=child.port)

    return replace(
        parent_identity,
        display_name=f"{parent_identity.display_name}->{executable_basename(child.command)}",
        port=child.port,
    )
