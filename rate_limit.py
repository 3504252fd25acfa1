import time
from typing import Callable, Optional

# Constants
DEFAULT_WINDOW_SECONDS = 60
DEFAULT_BATCH_CAP = 5


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Delay before retrying after failed attempt number `attempt` (1-based): 2s, 4s, 8s..."""
    return base_delay * (2 ** attempt)


class RateWindow:
    """Counts accepted webhook batches inside a fixed window that restarts once it has elapsed."""

    def __init__(self, cap: int = DEFAULT_BATCH_CAP, window_seconds: float = DEFAULT_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.cap = cap
        self.window_seconds = window_seconds
        self._clock = clock
        self.count = 0
        self.window_start = clock()

    def try_acquire(self) -> bool:
        now = self._clock()
        if now - self.window_start > self.window_seconds:
            self.count = 0
            self.window_start = now

        if self.count >= self.cap:
            return False

        self.count += 1
        return True


class DedupCursor:
    """Remembers the last token that produced a failure notice."""

    def __init__(self):
        self.last_failed: Optional[str] = None

    def should_notify(self, address: str) -> bool:
        return address != self.last_failed

    def record(self, address: str) -> None:
        self.last_failed = address
