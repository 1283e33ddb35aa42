"""
Batch working-directory resolution.

Many pids are resolved with one external query; results are kept in a small
TTL cache of their own so consecutive refresh ticks rarely query at all.
"""

import logging
import time
from typing import Callable, Dict, Iterable, Optional

from ..cache import TTLCache
from ..system.lookups import CwdLookup
from ..validation import (
    ErrorSeverity,
    ExternalToolError,
    handle_error,
    handle_subprocess_error,
    tool_error_severity,
)

logger = logging.getLogger(__name__)


def parse_lsof_cwd_output(output: str) -> Dict[int, str]:
    """Parse lsof field output into a pid -> cwd map.

    The stream repeats a ``p<pid>`` line followed by an ``n<path>`` line.
    Other field lines (``f``, ``t``...) are ignored, and a malformed pid line
    drops the record that follows it.

    Examples:
        >>> parse_lsof_cwd_output("p42\\nfcwd\\nn/home/ann/shop\\n")
        {42: '/home/ann/shop'}
    """
    cwds: Dict[int, str] = {}
    current_pid: Optional[int] = None

    for line in output.splitlines():
        if not line:
            continue
        marker, value = line[0], line[1:]
        if marker == "p":
            try:
                current_pid = int(value)
            except ValueError:
                logger.debug(f"Skipping unparseable lsof pid line: {line!r}")
                current_pid = None
        elif marker == "n" and current_pid is not None:
            if value:
                cwds[current_pid] = value
            current_pid = None

    return cwds


class CwdResolver:
    """Resolves pids to working directories, batching uncached pids."""

    def __init__(
        self,
        lookup: CwdLookup,
        ttl: float = 30.0,
        max_entries: int = 4096,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lookup = lookup
        self._cache: TTLCache[int, str] = TTLCache(max_entries, ttl, clock=clock)
        # External queries issued so far, for diagnostics.
        self.query_count = 0

    async def resolve_batch(self, pids: Iterable[int]) -> Dict[int, str]:
        """
        Resolve the working directories of ``pids``.

        Cached pids are answered locally; the remaining ones are resolved by
        a single external query. Never raises: on failure the map is partial
        or empty and nothing new is cached.

        Args:
            pids: Process ids; duplicates are ignored.

        Returns:
            Map from pid to working directory for every pid that resolved.
        """
        result: Dict[int, str] = {}
        missing = []
        for pid in dict.fromkeys(pids):
            cwd = self._cache.get(pid)
            if cwd is not None:
                result[pid] = cwd
            else:
                missing.append(pid)

        if not missing:
            return result

        self.query_count += 1
        try:
            output = await self._lookup.query_cwds(missing)
        except ExternalToolError as e:
            handle_subprocess_error(
                e,
                e.command or "cwd lookup",
                severity=tool_error_severity(e),
                reraise=False,
                logger=logger,
            )
            return result
        except Exception as e:
            handle_error(e, "cwd lookup", severity=ErrorSeverity.WARNING, reraise=False, logger=logger)
            return result

        wanted = set(missing)
        resolved = 0
        for pid, cwd in parse_lsof_cwd_output(output).items():
            if pid in wanted:
                result[pid] = cwd
                self._cache.set(pid, cwd)
                resolved += 1

        logger.debug(f"Resolved {resolved} of {len(missing)} queried cwd(s)")
        return result

    async def resolve(self, pid: int) -> Optional[str]:
        """Resolve one pid; None when unknown."""
        return (await self.resolve_batch([pid])).get(pid)

    def clear(self) -> None:
        self._cache.clear()

    def size(self) -> int:
        return self._cache.size()
