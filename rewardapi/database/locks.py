import threading
import weakref
from contextlib import contextmanager
from typing import Iterator

from rewardapi.core.exceptions import StoreUnavailableError


class UserLockRegistry:
    """Per-user mutual exclusion for check-then-write ledger sequences.

    Guards the read of an aggregate (balance, spun-today) and the dependent
    write inside one process. Cross-process safety comes from the row lock
    and unique constraints taken inside the transaction.
    """

    def __init__(self, timeout_seconds: float = 5.0):
        self.timeout_seconds = timeout_seconds
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        lock = self._lock_for(user_id)
        if not lock.acquire(timeout=self.timeout_seconds):
            raise StoreUnavailableError("Another request for this account is in progress, please retry")
        try:
            yield
        finally:
            lock.release()
