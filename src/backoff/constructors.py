import logging
import math
from collections.abc import Iterable

from src.backoff.budget import exponential_retries, linear_retries
from src.backoff.clock import Clock, monotonic_ms
from src.backoff.errors import InvalidPolicy
from src.models.policy import (
    EXHAUSTED,
    INFINITY,
    POLICY_TYPES,
    Exponential,
    Intervals,
    Linear,
    MaxTotalTimeout,
    Policy,
    Sequence,
    TimeCap,
)

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_timeout(value) -> bool:
    return _is_int(value) and value >= 0


def _is_infinity(value) -> bool:
    return isinstance(value, float) and value == INFINITY


def _check_retries(retries) -> None:
    if _is_infinity(retries) or (_is_int(retries) and retries > 0):
        return
    raise InvalidPolicy(f"retries must be a positive integer or INFINITY, got {retries!r}")


def _check_timeout(name: str, value) -> None:
    if not _is_timeout(value):
        raise InvalidPolicy(f"{name} must be an integer >= 0, got {value!r}")


def linear(retries: int | float | MaxTotalTimeout, timeout: int) -> Policy:
    """Wait ``timeout`` ms between attempts, ``retries`` times."""
    _check_timeout("timeout", timeout)
    if isinstance(retries, MaxTotalTimeout):
        retries = linear_retries(retries.budget, timeout)
        return Linear(retries, timeout) if retries else EXHAUSTED
    _check_retries(retries)
    return Linear(retries, timeout)


def exponential(
    retries: int | float | MaxTotalTimeout,
    factor: float,
    timeout: int,
    max_timeout: int | float = INFINITY,
) -> Policy:
    """Start at ``timeout`` ms and multiply by ``factor`` each step, capped at ``max_timeout``."""
    _check_timeout("timeout", timeout)
    if isinstance(factor, bool) or not isinstance(factor, (int, float)) \
            or not math.isfinite(factor) or factor <= 0:
        raise InvalidPolicy(f"factor must be a finite number > 0, got {factor!r}")
    if not (_is_infinity(max_timeout) or _is_timeout(max_timeout)):
        raise InvalidPolicy(f"max_timeout must be an integer >= 0 or INFINITY, got {max_timeout!r}")

    if isinstance(retries, MaxTotalTimeout):
        retries = exponential_retries(retries.budget, factor, timeout, max_timeout)
        if not retries:
            return EXHAUSTED
    else:
        _check_retries(retries)
    return Exponential(retries, factor, timeout, max_timeout)


def intervals(durations: Iterable[int]) -> Intervals:
    """Wait exactly ``durations`` ms, in order."""
    if isinstance(durations, (str, bytes)) or not isinstance(durations, Iterable):
        raise InvalidPolicy(f"intervals must be a sequence of durations, got {durations!r}")
    remaining = tuple(durations)
    if not remaining:
        raise InvalidPolicy("intervals must not be empty")
    for duration in remaining:
        if not _is_int(duration) or duration <= 0:
            raise InvalidPolicy(f"interval must be a positive integer, got {duration!r}")
    return Intervals(remaining)


def sequence(policies: Iterable[Policy]) -> Sequence:
    """Run ``policies`` back to back."""
    if not isinstance(policies, Iterable):
        raise InvalidPolicy(f"sequence must be a list of policies, got {policies!r}")
    entries = tuple(policies)
    if not entries:
        raise InvalidPolicy("sequence must not be empty")
    for entry in entries:
        if not isinstance(entry, POLICY_TYPES):
            raise InvalidPolicy(f"sequence entry is not a policy: {entry!r}")
    return Sequence(entries)


def with_time_cap(budget: int | float | None, policy: Policy, clock: Clock = monotonic_ms) -> Policy:
    """Bound ``policy`` to ``budget`` ms of wall-clock time from now.

    An unbounded budget (``None`` or ``INFINITY``) leaves the policy as is;
    any budget that is not a positive integer yields an exhausted policy.
    """
    if budget is None or _is_infinity(budget):
        return policy
    if _is_int(budget) and budget > 0:
        now = clock()
        return TimeCap(now, now + budget, policy, clock)
    logger.debug("time cap %r leaves no budget, policy exhausted", budget)
    return EXHAUSTED
