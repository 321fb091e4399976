"""Wall-clock timestamps for metric latency measurement."""

import time
from collections.abc import Callable


class Timer:
    """Millisecond-resolution timestamps that never run backwards.

    The wall clock is read once at construction; later readings advance it
    by the monotonic performance counter, so NTP adjustments between two
    calls cannot produce a negative elapsed time.
    """

    def __init__(
        self,
        wall_clock: Callable[[], float] = time.time,
        monotonic_clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._monotonic = monotonic_clock
        self._anchor_wall = wall_clock()
        self._anchor_mono = monotonic_clock()

    def now(self) -> float:
        """Seconds since the epoch, rounded to three decimal places."""
        elapsed = max(self._monotonic() - self._anchor_mono, 0.0)
        return round(self._anchor_wall + elapsed, 3)

    def elapsed_ms(self, start: float) -> float:
        """Milliseconds elapsed since a timestamp returned by ``now()``."""
        return max(round((self.now() - start) * 1000, 3), 0.0)


default_timer = Timer()
