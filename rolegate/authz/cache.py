"""
In-memory, per-role cache of resolved permission names.

Entries expire after a fixed TTL and are replaced lazily on the next read;
there is no background sweep. ``invalidate`` and ``invalidate_all`` are
plain in-memory operations that cannot fail.

Concurrency: the map is guarded by a ``threading.Lock`` whose critical
sections never await, so it is safe for event-loop tasks and worker
threads alike. Every key carries a generation number that invalidation
bumps. A computation records the generation it started under and only
stores its result if the generation is unchanged, so once ``invalidate``
returns no later read can observe the value that was computed before it.
"""

import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, FrozenSet, Optional

from rolegate.logging import Logger, ensure_logger

ComputeFn = Callable[[], Awaitable[Optional[FrozenSet[str]]]]


@dataclass(frozen=True)
class CacheEntry:
    permissions: FrozenSet[str]
    expires_at: float


class PermissionCache:
    """
    Map of role name to ``CacheEntry`` with a fixed time-to-live.

    Args:
        ttl_seconds: Lifetime of an entry
        clock: Monotonic time source, injectable for tests
        logger: Optional logger
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[Logger] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._generations: Dict[str, int] = {}
        self._global_generation = 0
        self._lock = threading.Lock()
        self._logger = ensure_logger(logger, __name__)

    def _generation(self, role_name: str) -> tuple:
        return (self._global_generation, self._generations.get(role_name, 0))

    def get(self, role_name: str) -> Optional[FrozenSet[str]]:
        """Return the unexpired cached set for a role, or None."""
        with self._lock:
            entry = self._entries.get(role_name)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[role_name]
                return None
            return entry.permissions

    async def resolve(
        self, role_name: str, compute: ComputeFn
    ) -> Optional[FrozenSet[str]]:
        """
        Return the cached set for ``role_name`` or compute and store it.

        ``compute`` returning None means the role is unknown: the None is
        passed through and nothing is stored. Errors raised by ``compute``
        propagate and leave the cache untouched.
        """
        cached = self.get(role_name)
        if cached is not None:
            self._logger.debug(f"Permission cache hit for role {role_name!r}")
            return cached

        self._logger.debug(f"Permission cache miss for role {role_name!r}")
        with self._lock:
            started = self._generation(role_name)

        permissions = await compute()
        if permissions is None:
            return None

        permissions = frozenset(permissions)
        with self._lock:
            if self._generation(role_name) == started:
                self._entries[role_name] = CacheEntry(
                    permissions=permissions,
                    expires_at=self._clock() + self.ttl_seconds,
                )
            else:
                self._logger.debug(
                    f"Discarding permissions computed for role {role_name!r} "
                    "before an invalidation"
                )
        return permissions

    def invalidate(self, role_name: str) -> None:
        """Remove exactly the entry for ``role_name``."""
        with self._lock:
            self._entries.pop(role_name, None)
            self._generations[role_name] = self._generations.get(role_name, 0) + 1
        self._logger.debug(f"Invalidated permission cache for role {role_name!r}")

    def invalidate_all(self) -> None:
        """Clear the whole cache."""
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._global_generation += 1
        self._logger.debug("Invalidated the whole permission cache")

    def __contains__(self, role_name: str) -> bool:
        return self.get(role_name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
