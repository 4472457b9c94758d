import time
from collections.abc import Callable

Clock = Callable[[], int]


def monotonic_ms() -> int:
    """Current monotonic time in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000
