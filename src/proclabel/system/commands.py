"""
External command execution.

This module runs the OS tools the resolvers depend on as child processes
awaited on the event loop, bounded by a timeout, and maps their failure
modes onto the ExternalToolError taxonomy.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Sequence

from ..validation import ToolTimeoutError, ToolUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished external command."""

    returncode: int
    stdout: str
    stderr: str


async def run_command(argv: Sequence[str], timeout: float) -> CommandResult:
    """Execute a command and capture its output.

    The command is started without a shell. A command still running after
    ``timeout`` seconds is killed and reaped before ToolTimeoutError is raised.

    Args:
        argv: Executable followed by its arguments.
        timeout: Maximum runtime in seconds.

    Returns:
        CommandResult with the exit code and decoded output. A non-zero
        exit code is returned, not raised; callers decide what it means.

    Raises:
        ToolUnavailableError: The executable is missing or cannot be started.
        ToolTimeoutError: The command exceeded ``timeout``.
    """
    command_str = " ".join(argv)
    logger.debug(f"Executing command: '{command_str}' (timeout {timeout}s)")

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ToolUnavailableError(
            f"Command not available: {argv[0]} ({type(e).__name__})", command=command_str
        ) from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        if process.returncode is None:
            process.kill()
        await process.wait()
        raise ToolTimeoutError(
            f"Command timed out after {timeout}s: {command_str}",
            command=command_str,
            timeout=timeout,
        ) from e

    return CommandResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def is_command_available(command: str) -> bool:
    """Check whether an executable is found in the system PATH."""
    return shutil.which(command) is not None
