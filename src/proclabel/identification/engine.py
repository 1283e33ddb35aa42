"""
Process identification engine.

The engine turns ProcessQuery records into IdentifiedProcess labels:

1. A TTL/LRU cache answers repeated queries without any external call.
2. An in-flight registry makes concurrent identical queries share one
   resolution.
3. Context (working directory, container by port) comes from batching
   resolvers; identify_batch() prefetches it for all cache misses with at
   most one external query per kind.
4. The ordered PatternMatcher rules turn command line plus context into a
   label, with the executable basename as the last resort.

No exception escapes identify() or identify_batch(): the consumer is a live
display that must keep refreshing, so failures degrade to a less specific
label instead.
"""

import asyncio
import logging
import re
import time
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..cache import InFlightRegistry, TTLCache
from ..models import (
    ContainerInfo,
    IdentifiedProcess,
    IdentifierConfig,
    ProcessCategory,
    ProcessContext,
    ProcessQuery,
)
from ..patterns import PatternMatcher, executable_basename
from ..resolvers import ContainerPortResolver, CwdResolver, extract_project_name
from ..system.lookups import ContainerLookup, CwdLookup, DockerContainerLookup, LsofCwdLookup
from ..validation import ErrorSeverity, handle_error
from .relationship import inherit_identity, should_inherit
from .tree import ProcessTree

logger = logging.getLogger(__name__)

_DOCKER_DESKTOP = re.compile(r"com\.docker", re.IGNORECASE)


class IdentificationEngine:
    """
    Owns the identification cache, the in-flight registry and the resolvers.

    One instance is meant to live as long as the monitor and be shared by
    everything that needs labels; separate instances share nothing.
    """

    def __init__(
        self,
        config: Optional[IdentifierConfig] = None,
        cwd_lookup: Optional[CwdLookup] = None,
        container_lookup: Optional[ContainerLookup] = None,
        matcher: Optional[PatternMatcher] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            config: Cache and resolver settings; defaults when omitted.
            cwd_lookup: Working-directory capability; lsof when omitted.
            container_lookup: Container listing capability; docker when omitted.
            matcher: Classification rules; the default rule order when omitted.
            clock: Monotonic time source shared by all caches.
        """
        self.config = config or IdentifierConfig()
        timeout = self.config.command_timeout_seconds

        self._cache: TTLCache[str, IdentifiedProcess] = TTLCache(
            self.config.max_entries, self.config.ttl_seconds, clock=clock
        )
        self._in_flight: InFlightRegistry[str, IdentifiedProcess] = InFlightRegistry()

        self.cwd_resolver = CwdResolver(
            cwd_lookup or LsofCwdLookup(self.config.lsof_command, timeout=timeout),
            ttl=self.config.cwd_cache_ttl_seconds,
            max_entries=self.config.cwd_cache_max_entries,
            clock=clock,
        )
        self.container_resolver = ContainerPortResolver(
            container_lookup or DockerContainerLookup(self.config.docker_command, timeout=timeout),
            ttl=self.config.container_cache_ttl_seconds,
            clock=clock,
        )
        self.matcher = matcher or PatternMatcher()

    def cache_key(self, query: ProcessQuery) -> str:
        """pid, port and a bounded command prefix."""
        command_prefix = query.command[:self.config.key_command_prefix]
        return f"{query.pid}:{query.port or ''}:{command_prefix}"

    async def identify(self, query: ProcessQuery) -> IdentifiedProcess:
        """
        Label a single process.

        A fresh cache entry is returned without external calls. Otherwise the
        resolution is started, or joined if one for the same key is running,
        and its result cached.

        Args:
            query: The process to label.

        Returns:
            The label; a basename fallback if resolution failed.
        """
        key = self.cache_key(query)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        return await self._resolve(key, query)

    async def identify_batch(self, queries: Iterable[ProcessQuery]) -> Dict[int, IdentifiedProcess]:
        """
        Label many processes with at most one cwd query and one container query.

        Cache hits are answered first. For the misses, working directories
        and container ports are prefetched in one query each, then the misses
        are labelled parents before children so a child can inherit its
        parent's label.

        Args:
            queries: Processes of one refresh tick.

        Returns:
            Map from pid to label.
        """
        queries = list(queries)
        identified: Dict[int, IdentifiedProcess] = {}
        misses: List[Tuple[str, ProcessQuery]] = []

        for query in queries:
            key = self.cache_key(query)
            cached = self._cache.get(key)
            if cached is not None:
                identified[query.pid] = cached
            else:
                misses.append((key, query))

        if not misses:
            return identified

        cwds, containers = await self._prefetch([query for _, query in misses])

        tree = ProcessTree(queries)
        misses.sort(key=lambda item: (tree.depth(item[1].pid), item[1].pid))

        for key, query in misses:
            identified[query.pid] = await self._identify_prefetched(
                key, query, tree, identified, cwds, containers
            )

        logger.debug(
            f"Identified {len(queries)} process(es): {len(queries) - len(misses)} cached, "
            f"{len(misses)} resolved"
        )
        return identified

    def clear_cache(self) -> None:
        """Drop every cached label and resolver cache entry."""
        self._cache.clear()
        self._in_flight.clear()
        self.cwd_resolver.clear()
        self.container_resolver.clear()

    def get_cache_stats(self) -> Dict[str, int]:
        return {
            "identified": self._cache.size(),
            "in_flight": self._in_flight.size(),
            "cwd": self.cwd_resolver.size(),
            "containers": self.container_resolver.size(),
        }

    async def _prefetch(
        self, queries: List[ProcessQuery]
    ) -> Tuple[Dict[int, str], Dict[int, ContainerInfo]]:
        pids = [query.pid for query in queries if query.cwd is None]
        ports = [query.port for query in queries if query.port]

        async def no_cwds() -> Dict[int, str]:
            return {}

        async def no_containers() -> Dict[int, ContainerInfo]:
            return {}

        try:
            cwds, containers = await asyncio.gather(
                self.cwd_resolver.resolve_batch(pids) if pids else no_cwds(),
                self.container_resolver.resolve_batch(ports) if ports else no_containers(),
            )
        except Exception as e:
            handle_error(
                e, "prefetching process context", severity=ErrorSeverity.WARNING,
                reraise=False, logger=logger,
            )
            return {}, {}
        return cwds, containers

    async def _identify_prefetched(
        self,
        key: str,
        query: ProcessQuery,
        tree: ProcessTree,
        identified: Dict[int, IdentifiedProcess],
        cwds: Dict[int, str],
        containers: Dict[int, ContainerInfo],
    ) -> IdentifiedProcess:
        if query.port and query.port in containers:
            result = self._container_identity(containers[query.port], query.port)
            self._cache.set(key, result)
            return result

        parent = tree.get_parent(query.pid)
        parent_identity = identified.get(parent.pid) if parent else None
        if parent_identity is not None and should_inherit(query, parent, parent_identity):
            result = inherit_identity(parent_identity, query)
            self._cache.set(key, result)
            return result

        enriched = replace(query, cwd=query.cwd or cwds.get(query.pid))
        return await self._resolve(key, enriched, containers=containers, cwd_prefetched=True)

    async def _resolve(
        self,
        key: str,
        query: ProcessQuery,
        containers: Optional[Dict[int, ContainerInfo]] = None,
        cwd_prefetched: bool = False,
    ) -> IdentifiedProcess:
        async def produce() -> IdentifiedProcess:
            result = await self._do_identify(query, containers, cwd_prefetched)
            self._cache.set(key, result)
            return result

        try:
            return await self._in_flight.get_or_start(key, produce)
        except Exception as e:
            handle_error(
                e,
                f"identifying pid {query.pid}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return self._fallback(query, extract_project_name(query.cwd, query.command))

    async def _do_identify(
        self,
        query: ProcessQuery,
        containers: Optional[Dict[int, ContainerInfo]] = None,
        cwd_prefetched: bool = False,
    ) -> IdentifiedProcess:
        """Resolve context and classify; ``containers`` / ``cwd_prefetched``
        mark context that a batch already fetched."""
        port = query.port

        if port:
            if containers is not None:
                container = containers.get(port)
            else:
                container = await self.container_resolver.resolve(port)
            if container is not None:
                return self._container_identity(container, port)

        cwd = query.cwd
        if cwd is None and not cwd_prefetched:
            cwd = await self.cwd_resolver.resolve(query.pid)
        project_name = extract_project_name(cwd, query.command)

        if port and _DOCKER_DESKTOP.search(query.command):
            return IdentifiedProcess(
                display_name=f"docker:{port}", category=ProcessCategory.CONTAINER, port=port
            )

        identified = self.matcher.apply_patterns(
            query.command, ProcessContext(cwd=cwd, project_name=project_name, port=port)
        )
        if identified is not None:
            return replace(identified, port=port)

        return self._fallback(query, project_name)

    @staticmethod
    def _container_identity(container: ContainerInfo, port: int) -> IdentifiedProcess:
        return IdentifiedProcess(
            display_name=f"docker:{container.name}",
            category=ProcessCategory.CONTAINER,
            project=container.name,
            port=port,
            container_info=container,
        )

    @staticmethod
    def _fallback(query: ProcessQuery, project_name: Optional[str]) -> IdentifiedProcess:
        return IdentifiedProcess(
            display_name=executable_basename(query.command) or str(query.pid),
            category=ProcessCategory.SYSTEM,
            project=project_name,
            port=query.port,
        )
