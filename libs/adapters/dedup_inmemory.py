from __future__ import annotations
import threading
from collections import OrderedDict
from time import monotonic
from typing import Callable


class RecentMessageCache:
    """
    Short-TTL set of provider message ids already processed by this process.
    ttl_seconds == 0 turns it into a no-op (plain at-least-once delivery).
    """

    def __init__(self, ttl_seconds: int = 600, *, max_entries: int = 10_000, clock: Callable[[], float] = monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock
        self._seen: "OrderedDict[str, float]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def seen(self, message_id: str) -> bool:
        if not self.enabled or not message_id:
            return False
        with self._lock:
            self._evict(self.clock())
            return message_id in self._seen

    def remember(self, message_id: str) -> None:
        if not self.enabled or not message_id:
            return
        with self._lock:
            now = self.clock()
            self._evict(now)
            self._seen[message_id] = now + self.ttl_seconds
            self._seen.move_to_end(message_id)
            while len(self._seen) > self.max_entries:
                self._seen.popitem(last=False)

    def reserve(self, message_id: str) -> bool:
        """
        Check-and-record in one step. False means another delivery of the same id
        already holds it (running or done); release() frees it after a failure.
        """
        if not self.enabled or not message_id:
            return True
        with self._lock:
            now = self.clock()
            self._evict(now)
            if message_id in self._seen:
                return False
            self._seen[message_id] = now + self.ttl_seconds
            while len(self._seen) > self.max_entries:
                self._seen.popitem(last=False)
            return True

    def release(self, message_id: str) -> None:
        if not self.enabled or not message_id:
            return
        with self._lock:
            self._seen.pop(message_id, None)

    def _evict(self, now: float) -> None:
        # insertion order == expiry order since ttl is fixed
        while self._seen:
            mid, expires_at = next(iter(self._seen.items()))
            if expires_at > now:
                break
            self._seen.popitem(last=False)

    def __len__(self) -> int:
        return len(self._seen)
