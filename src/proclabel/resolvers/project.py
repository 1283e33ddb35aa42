"""
Project-name inference from a working directory and a command line.
"""

import os
import re
from typing import Optional

# Directories that hold many projects; never a project name themselves.
CONTAINER_DIRS = frozenset(
    ["repositories", "projects", "code", "workspace", "dev", "src", "work", "git"]
)

# Build-artifact subdirectories that can follow a container directory.
ARTIFACT_DIRS = frozenset(["node_modules", "dist", "bin", "lib", "build", ".git"])

_DEEP_PROJECT_PATTERN = re.compile(
    r"/(repositories|projects|code|workspace|dev|src|work|git)/([^/]+)/(dist|src|bin|lib|build|out)/"
)
_COMMAND_PROJECT_PATTERN = re.compile(r"/(repositories|projects|code|workspace|dev)/([^/]+)/")


def extract_project_name(cwd: Optional[str], command: str) -> Optional[str]:
    """Infer a project name for a process.

    When ``cwd`` is a generic container directory such as ``~/repositories``,
    the project is mined from the command line instead: first the path
    segment right after that directory (unless it is a build artifact
    directory), then a ``/<container>/<project>/<dist|src|...>/`` pattern.
    Without a cwd, a ``/<container>/<project>/`` segment of the command is
    used. Returns None rather than guessing.

    Examples:
        >>> extract_project_name("/Users/ann/shop", "node server.js")
        'shop'
        >>> extract_project_name("/Users/ann/repositories", "node /Users/ann/repositories/shop/index.js")
        'shop'
        >>> extract_project_name(None, "node /repositories/myapp/dist/server.js")
        'myapp'
    """
    if cwd:
        basename = os.path.basename(cwd.rstrip("/"))
        if not basename:
            return None

        if basename.lower() in CONTAINER_DIRS:
            match = re.search(f"/{re.escape(basename)}/([^/]+)/", command)
            if match and match.group(1) not in ARTIFACT_DIRS:
                return match.group(1)

            deep_match = _DEEP_PROJECT_PATTERN.search(command)
            if deep_match:
                return deep_match.group(2)

            return None

        return basename

    command_match = _COMMAND_PROJECT_PATTERN.search(command)
    if command_match:
        return command_match.group(2)

    return None
