import math
from collections.abc import Callable
from dataclasses import dataclass, field

# Unlimited retries / unbounded timeouts and budgets.
INFINITY = math.inf


@dataclass(frozen=True)
class Linear:
    retries: int | float
    timeout: int


@dataclass(frozen=True)
class Exponential:
    retries: int | float
    factor: float
    timeout: int
    max_timeout: int | float = INFINITY


@dataclass(frozen=True)
class Intervals:
    remaining: tuple[int, ...]


@dataclass(frozen=True)
class Sequence:
    policies: tuple["Policy", ...]


@dataclass(frozen=True)
class TimeCap:
    """Wraps a policy so that no wait ends past ``deadline``.

    Both instants are milliseconds on ``clock``, which is read on every step.
    """

    last_tick: int
    deadline: int
    inner: "Policy"
    clock: Callable[[], int] = field(compare=False, repr=False)


@dataclass(frozen=True)
class Exhausted:
    pass


EXHAUSTED = Exhausted()

Policy = Linear | Exponential | Intervals | Sequence | TimeCap | Exhausted

POLICY_TYPES = (Linear, Exponential, Intervals, Sequence, TimeCap, Exhausted)


@dataclass(frozen=True)
class Wait:
    """One step result: sleep ``duration`` ms, then advance ``policy``."""

    duration: int
    policy: Policy


@dataclass(frozen=True)
class MaxTotalTimeout:
    """Asks a constructor to derive its retry count from a total budget (ms)."""

    budget: int
