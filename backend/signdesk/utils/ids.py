import threading
import time


class TimeIdGenerator:
    """Milliseconds-since-epoch identifiers, strictly increasing within a process."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


new_id = TimeIdGenerator()
