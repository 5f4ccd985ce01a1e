#  Bankr App Kit - Request Ledger
#
#  Sliding-window record of admitted request timestamps (milliseconds).
#  Entries are appended in non-decreasing order and evicted from the front,
#  so each purge is amortized O(1).
#
#  Not synchronized: the owning AgentGateway serializes access.
#
#  Depends on: (none)
#  Used by:    services/gateway.py

import time
from collections import deque


def monotonic_ms() -> int:
    """Monotonic clock reading in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


class RequestLedger:
    """Timestamps of requests inside a trailing window.

    The lower bound is inclusive: an entry at exactly ``now - window_ms``
    is still inside the window and counts toward the limit.
    """

    def __init__(self, window_ms: int):
        if window_ms <= 0:
            raise ValueError(f"window_ms must be > 0, got {window_ms}")
        self._window_ms = window_ms
        self._entries: deque[int] = deque()

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def __len__(self) -> int:
        return len(self._entries)

    def purge(self, now_ms: int) -> int:
        """Evict entries older than the window. Returns how many were removed."""
        lower = now_ms - self._window_ms
        removed = 0
        while self._entries and self._entries[0] < lower:
            self._entries.popleft()
            removed += 1
        return removed

    def record(self, now_ms: int):
        if self._entries and now_ms < self._entries[-1]:
            raise ValueError("ledger timestamps must not go backwards")
        self._entries.append(now_ms)

    def discard(self, ts_ms: int) -> bool:
        """Remove one entry equal to ts_ms (refund). Returns False if absent."""
        try:
            self._entries.remove(ts_ms)
        except ValueError:
            return False
        return True

    def oldest(self) -> int | None:
        return self._entries[0] if self._entries else None

    def retry_after_ms(self, now_ms: int) -> int:
        """Milliseconds until the oldest entry leaves the window (0 if empty)."""
        oldest = self.oldest()
        if oldest is None:
            return 0
        # Inclusive bound: the entry still counts at oldest + window
        return max(0, oldest + self._window_ms + 1 - now_ms)
