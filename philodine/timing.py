"""Wall-clock helpers and a sleep that can be cut short."""

from __future__ import annotations

import time
from collections.abc import Callable

_COARSE_SLEEP_THRESHOLD_US = 10_000


def now_ms() -> int:
    """Return the current wall-clock time in whole milliseconds."""
    return time.time_ns() // 1_000_000


def now_us() -> int:
    """Return the current wall-clock time in whole microseconds."""
    return time.time_ns() // 1_000


def precise_sleep(usec: int, should_stop: Callable[[], bool]) -> None:
    """Sleep for ``usec`` microseconds, stopping early once ``should_stop()`` is true.

    Long remainders are slept coarsely in halves; the final stretch of at
    most ten milliseconds is spun out for accuracy.
    """
    start = now_us()
    while now_us() - start < usec:
        if should_stop():
            break
        remaining = usec - (now_us() - start)
        if remaining > _COARSE_SLEEP_THRESHOLD_US:
            time.sleep(remaining / 2 / 1_000_000)
        else:
            while now_us() - start < usec:
                pass