import threading
import time


class SystemClock:
    """Wall-clock milliseconds, strictly increasing within a process.

    The wall time is sampled once and advanced with ``time.monotonic`` so an
    NTP step cannot produce a negative relative time mid-round. Reads that
    land in the same millisecond are pushed one millisecond past the previous
    read, so no two accepted buzzes share an instant.
    """

    def __init__(self):
        self._wall_anchor = time.time()
        self._mono_anchor = time.monotonic()
        self._last = None
        self._lock = threading.Lock()

    def __call__(self) -> int:
        elapsed = time.monotonic() - self._mono_anchor
        now = int((self._wall_anchor + elapsed) * 1000)
        with self._lock:
            if self._last is not None and now <= self._last:
                now = self._last + 1
            self._last = now
            return now


class ManualClock:
    """Clock driven by hand, for tests and replays."""

    def __init__(self, start_ms: int = 0):
        self._now = int(start_ms)
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self._now

    def advance(self, ms: int) -> int:
        with self._lock:
            self._now += int(ms)
            return self._now

    def tick(self) -> int:
        """Return the current time, then step forward by one millisecond."""
        with self._lock:
            now = self._now
            self._now += 1
            return now
