"""
Time helpers.

The adapter never reads the wall clock directly; components receive a clock
callable so tests can pin "now". ``milliseconds`` is the default clock.
"""

import time
from typing import Callable

Clock = Callable[[], int]

MICROSECONDS_PER_SECOND = 1_000_000


def milliseconds() -> int:
    """Return the current time as milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def microseconds_to_seconds(value: int) -> int:
    """
    Convert epoch microseconds to whole epoch seconds.

    The fractional part is truncated toward zero, never rounded:
    1_500_000_500_000 becomes 1_500_000, and -1_500_000 becomes -1.

    Args:
        value: Timestamp in microseconds.

    Returns:
        int: Timestamp in whole seconds.
    """
    seconds = abs(value) // MICROSECONDS_PER_SECOND
    return seconds if value >= 0 else -seconds
