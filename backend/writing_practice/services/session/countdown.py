import math
import time
from typing import Callable, Optional

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    return time.time() * 1000.0


def seconds_until(deadline_ms: float, now_ms: float) -> int:
    """Whole seconds left before ``deadline_ms``, rounded up, never negative."""
    return max(0, math.ceil((deadline_ms - now_ms) / 1000.0))


class Countdown:
    """Remaining time for one session, always derived from the deadline.

    Nothing is decremented locally: a tick that arrives late (suspended
    process, slow worker) still reads the true remaining value. ``tick``
    reports expiry exactly once through a one-shot latch; callers must
    serialize ticks, which the session lock does.
    """

    def __init__(self, deadline_ms: float, clock: Optional[Clock] = None):
        self.deadline_ms = deadline_ms
        self.clock = clock or wall_clock_ms
        self.seconds_remaining = self.remaining()
        self._expired = False

    def remaining(self) -> int:
        return seconds_until(self.deadline_ms, self.clock())

    def tick(self) -> bool:
        """Recompute ``seconds_remaining``; True only on the first zero reading."""
        self.seconds_remaining = self.remaining()
        if self.seconds_remaining == 0 and not self._expired:
            self._expired = True
            return True
        return False
