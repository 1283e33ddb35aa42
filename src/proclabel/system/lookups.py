"""
OS query capabilities behind narrow interfaces.

The resolvers never spawn processes themselves; they call one of these
capabilities and parse the raw text it returns. Tests substitute fakes.

- CwdLookup: working directories of a batch of pids (lsof).
- ContainerLookup: running containers with their port mappings (docker).
"""

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from ..validation import ToolExecutionError
from .commands import run_command

logger = logging.getLogger(__name__)

# One record per container: name|image|ports
DOCKER_PS_FORMAT = "{{.Names}}|{{.Image}}|{{.Ports}}"


class CwdLookup(ABC):
    """Capability: working directory of many processes in one query."""

    @abstractmethod
    async def query_cwds(self, pids: Sequence[int]) -> str:
        """
        Return raw field output: a ``p<pid>`` line followed by an ``n<path>``
        line for every process that could be inspected.

        Raises:
            ExternalToolError: If the query cannot be performed.
        """


class ContainerLookup(ABC):
    """Capability: list running containers with published ports."""

    @abstractmethod
    async def list_containers(self) -> str:
        """
        Return one ``name|image|ports`` line per running container.

        Raises:
            ExternalToolError: If the query cannot be performed.
        """


class LsofCwdLookup(CwdLookup):
    """Working directories through a single ``lsof -a -p PIDS -d cwd -F pn``."""

    def __init__(self, command: str = "lsof", timeout: float = 3.0) -> None:
        self.command = command
        self.timeout = timeout

    async def query_cwds(self, pids: Sequence[int]) -> str:
        if not pids:
            return ""
        pid_list = ",".join(str(pid) for pid in pids)
        result = await run_command(
            [self.command, "-a", "-p", pid_list, "-d", "cwd", "-F", "pn"],
            timeout=self.timeout,
        )
        # lsof exits 1 when any pid is gone or not inspectable, yet still
        # reports the others; only an empty failure is an error.
        if result.returncode != 0 and not result.stdout.strip():
            raise ToolExecutionError(
                f"{self.command} exited with {result.returncode}",
                command=self.command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result.stdout


class DockerContainerLookup(ContainerLookup):
    """Running containers through a single ``docker ps``."""

    def __init__(self, command: str = "docker", timeout: float = 3.0) -> None:
        self.command = command
        self.timeout = timeout

    async def list_containers(self) -> str:
        result = await run_command(
            [self.command, "ps", "--format", DOCKER_PS_FORMAT],
            timeout=self.timeout,
        )
        if result.returncode != 0:
            # Typically the daemon is not running.
            raise ToolExecutionError(
                f"{self.command} ps exited with {result.returncode}",
                command=self.command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return result.stdout
