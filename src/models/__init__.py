from .policy import (
    EXHAUSTED,
    INFINITY,
    POLICY_TYPES,
    Exhausted,
    Exponential,
    Intervals,
    Linear,
    MaxTotalTimeout,
    Policy,
    Sequence,
    TimeCap,
    Wait,
)

__all__ = [
    "EXHAUSTED", "INFINITY", "POLICY_TYPES",
    "Exhausted", "Exponential", "Intervals", "Linear", "Sequence", "TimeCap",
    "MaxTotalTimeout", "Policy", "Wait",
]
