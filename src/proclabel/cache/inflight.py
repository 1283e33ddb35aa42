"""
De-duplication of concurrent identical work.

The registry maps a key to the asyncio task currently producing its value.
Callers arriving while that task runs await the same task instead of
starting their own, so for any key at most one producer runs at a time.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class InFlightRegistry(Generic[K, V]):
    """Tracks identification work in progress per cache key."""

    def __init__(self) -> None:
        self._pending: Dict[K, "asyncio.Task[V]"] = {}

    async def get_or_start(self, key: K, producer: Callable[[], Awaitable[V]]) -> V:
        """
        Return the result of the resolution for ``key``, starting it if needed.

        The registration is removed when the producer finishes, successfully
        or not, before any caller observes the outcome. A producer error is
        raised to every caller that shared the resolution.

        Args:
            key: Cache key identifying the work.
            producer: Zero-argument coroutine function doing the work.

        Returns:
            The producer's result.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, producer))
            self._pending[key] = task
        else:
            logger.debug(f"Joining in-flight resolution for key {key!r}")

        # Cancelling one waiter must not cancel the shared resolution.
        return await asyncio.shield(task)

    async def _run(self, key: K, producer: Callable[[], Awaitable[V]]) -> V:
        try:
            return await producer()
        finally:
            # After clear() the key may already belong to a newer task.
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def is_pending(self, key: K) -> bool:
        return key in self._pending

    def size(self) -> int:
        return len(self._pending)

    def clear(self) -> None:
        """Forget all registrations; running tasks still complete for their waiters."""
        self._pending.clear()
