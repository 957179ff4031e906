"""Per-user critical sections for read-then-write mutations."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID


class UserLocks:
    """In-process re-entrant lock per user id."""

    def __init__(self) -> None:
        self._locks: dict[UUID, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, user_id: UUID) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: UUID) -> Iterator[None]:
        """Serialize mutations for ``user_id`` while the block runs."""
        lock = self._lock_for(user_id)
        with lock:
            yield
