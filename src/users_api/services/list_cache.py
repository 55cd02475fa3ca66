"""Single-slot cache for the user list."""

import logging
import threading
import time
from collections.abc import Callable, Iterable

from users_api.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes


class ListCache:
    """Holds at most one snapshot of the user list with sliding expiration.

    A hit pushes the expiry forward by the TTL. Snapshots are copied into a
    tuple on ``put`` so later changes to the source list cannot leak in.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl_seconds: Sliding expiration window in seconds
            clock: Monotonic time source, injectable for tests
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: tuple[User, ...] | None = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    def get(self) -> tuple[User, ...] | None:
        """Get the cached snapshot.

        Returns:
            The snapshot if present and not expired, otherwise None
        """
        with self._lock:
            now = self._clock()
            if self._snapshot is None:
                logger.debug("List cache miss")
                return None
            if now >= self._expires_at:
                logger.debug("List cache expired")
                self._snapshot = None
                return None
            self._expires_at = now + self.ttl_seconds
            logger.debug("List cache hit (%d users)", len(self._snapshot))
            return self._snapshot

    def put(self, snapshot: Iterable[User]) -> None:
        """Store a copy of the snapshot and reset the expiry."""
        with self._lock:
            self._snapshot = tuple(snapshot)
            self._expires_at = self._clock() + self.ttl_seconds

    def invalidate(self) -> None:
        """Clear the slot unconditionally."""
        with self._lock:
            if self._snapshot is not None:
                logger.debug("List cache invalidated")
            self._snapshot = None
            self._expires_at = 0.0
