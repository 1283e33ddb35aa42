"""
Batch container lookup by published host port.

One ``docker ps`` lists every running container with its port mappings;
all requested ports are matched against that single listing.
"""

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..cache import TTLCache
from ..models import ContainerInfo
from ..system.lookups import ContainerLookup
from ..validation import (
    ErrorSeverity,
    ExternalToolError,
    handle_error,
    handle_subprocess_error,
    tool_error_severity,
)

logger = logging.getLogger(__name__)


def parse_container_listing(output: str) -> List[Tuple[ContainerInfo, str]]:
    """Parse ``name|image|ports`` lines into (container, raw ports) pairs.

    Lines with fewer than two fields are skipped. A container without
    published ports yields an empty ports string.
    """
    containers: List[Tuple[ContainerInfo, str]] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("|")
        if len(fields) < 2 or not fields[0]:
            logger.debug(f"Skipping unparseable container line: {line!r}")
            continue
        ports_field = fields[2] if len(fields) > 2 else ""
        containers.append((ContainerInfo(name=fields[0], image=fields[1]), ports_field))
    return containers


def match_ports(
    containers: List[Tuple[ContainerInfo, str]], ports: Iterable[int]
) -> Dict[int, ContainerInfo]:
    """Map each requested port to the container publishing it.

    A port belongs to a container when its raw ports field (for example
    ``0.0.0.0:5432->5432/tcp, :::5432->5432/tcp``) contains ``":<port>->"``.
    This is a plain substring test over the raw field; when several
    containers match, the last one listed wins.
    """
    matched: Dict[int, ContainerInfo] = {}
    for container, ports_field in containers:
        for port in ports:
            if ports_field and f":{port}->" in ports_field:
                matched[port] = container
    return matched


class ContainerPortResolver:
    """Resolves listening ports to containers, one listing per batch."""

    def __init__(
        self,
        lookup: ContainerLookup,
        ttl: float = 30.0,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lookup = lookup
        self._cache: TTLCache[int, ContainerInfo] = TTLCache(max_entries, ttl, clock=clock)
        # External queries issued so far, for diagnostics.
        self.query_count = 0

    async def resolve_batch(self, ports: Iterable[int]) -> Dict[int, ContainerInfo]:
        """
        Resolve which of ``ports`` are published by a running container.

        Ports cached within the TTL window are answered locally. If any
        requested port is not cached, one container listing is fetched and
        matched against all of them. Never raises: a missing container
        runtime, a stopped daemon or a timeout yields the cached part only.

        Args:
            ports: Host ports; duplicates are ignored.

        Returns:
            Map from port to container for the ports that matched.
        """
        requested = list(dict.fromkeys(ports))
        result: Dict[int, ContainerInfo] = {}
        missing = []
        for port in requested:
            info = self._cache.get(port)
            if info is not None:
                result[port] = info
            else:
                missing.append(port)

        if not missing:
            return result

        self.query_count += 1
        try:
            output = await self._lookup.list_containers()
        except ExternalToolError as e:
            handle_subprocess_error(
                e,
                e.command or "container lookup",
                severity=tool_error_severity(e),
                reraise=False,
                logger=logger,
            )
            return result
        except Exception as e:
            handle_error(
                e, "container lookup", severity=ErrorSeverity.WARNING, reraise=False, logger=logger
            )
            return result

        for port, info in match_ports(parse_container_listing(output), missing).items():
            result[port] = info
            self._cache.set(port, info)

        logger.debug(f"Matched {len(result)} of {len(requested)} port(s) to containers")
        return result

    async def resolve(self, port: int) -> Optional[ContainerInfo]:
        """Resolve one port; None when no container publishes it."""
        return (await self.resolve_batch([port])).get(port)

    def clear(self) -> None:
        self._cache.clear()

    def size(self) -> int:
        return self._cache.size()
