"""
Uptime Tracking

Records the instant the service started and reports how long it has
been running, in whole seconds.
"""

import math
import time
from typing import Callable


class UptimeTracker:
    """
    Elapsed-time tracker anchored at construction time.

    The start instant is captured once and never changes. The clock
    defaults to time.monotonic so the reported uptime can never go
    backwards when the wall clock is adjusted; tests may pass any
    zero-argument callable returning seconds.

    Attributes:
        started_at: Clock reading taken when the tracker was created
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.started_at = clock()

    def elapsed_seconds(self) -> int:
        """Return whole seconds since start (floored, never negative)."""
        elapsed = self._clock() - self.started_at
        return max(0, math.floor(elapsed))
