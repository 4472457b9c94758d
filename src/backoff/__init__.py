from .clock import monotonic_ms
from .config import from_config
from .constructors import exponential, intervals, linear, sequence, with_time_cap
from .engine import advance, all_waits, contains_time_cap, is_bounded
from .errors import BackoffError, InvalidPolicy, InvalidState, UnsupportedPolicy
from .retry import RetryManager

__all__ = [
    "linear", "exponential", "intervals", "sequence", "with_time_cap", "from_config",
    "advance", "all_waits", "contains_time_cap", "is_bounded",
    "BackoffError", "InvalidPolicy", "InvalidState", "UnsupportedPolicy",
    "RetryManager", "monotonic_ms",
]
