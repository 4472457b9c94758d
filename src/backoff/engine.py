import logging
import math
from fractions import Fraction

from src.backoff.errors import InvalidState, UnsupportedPolicy
from src.models.policy import (
    EXHAUSTED,
    INFINITY,
    Exhausted,
    Exponential,
    Intervals,
    Linear,
    Policy,
    Sequence,
    TimeCap,
    Wait,
)

logger = logging.getLogger(__name__)


def _grow(timeout: int, factor: int | float) -> int:
    """``timeout * factor`` rounded half away from zero, in exact arithmetic."""
    if isinstance(factor, int):
        return timeout * factor
    return math.floor(timeout * Fraction(factor) + Fraction(1, 2))


def advance(policy: Policy) -> Wait | Exhausted:
    """Take one step of ``policy``.

    Returns a :class:`Wait` holding the delay in ms and the policy to advance
    next time, or ``EXHAUSTED`` when no retries are left. The argument is
    never modified, so a starting policy can be reused for any number of
    independent retry sequences.
    """
    if isinstance(policy, Linear):
        if policy.retries <= 0:
            return EXHAUSTED
        retries = policy.retries - 1
        following = Linear(retries, policy.timeout) if retries > 0 else EXHAUSTED
        return Wait(policy.timeout, following)

    if isinstance(policy, Exponential):
        if policy.retries <= 0:
            return EXHAUSTED
        retries = policy.retries - 1
        if retries > 0:
            timeout = min(_grow(policy.timeout, policy.factor), policy.max_timeout)
            following = Exponential(retries, policy.factor, timeout, policy.max_timeout)
        else:
            following = EXHAUSTED
        return Wait(policy.timeout, following)

    if isinstance(policy, Intervals):
        if not policy.remaining:
            return EXHAUSTED
        head, tail = policy.remaining[0], policy.remaining[1:]
        return Wait(head, Intervals(tail) if tail else EXHAUSTED)

    if isinstance(policy, Sequence):
        entries = policy.policies
        for index, entry in enumerate(entries):
            step = advance(entry)
            if isinstance(step, Wait):
                return Wait(step.duration, Sequence((step.policy,) + entries[index + 1:]))
            logger.debug("sequence entry %d exhausted, moving on", index)
        return EXHAUSTED

    if isinstance(policy, TimeCap):
        return _advance_time_cap(policy)

    if isinstance(policy, Exhausted):
        return EXHAUSTED

    raise InvalidState(policy)


def _advance_time_cap(policy: TimeCap) -> Wait | Exhausted:
    now = policy.clock()
    step = advance(policy.inner)
    if not isinstance(step, Wait):
        return EXHAUSTED

    # Time already spent since the last wait ended counts against this one.
    timeout = max(0, step.duration - (now - policy.last_tick))
    if now + timeout > policy.deadline:
        logger.debug(
            "time cap reached: wait of %d ms at %d would end past deadline %d",
            timeout, now, policy.deadline,
        )
        return EXHAUSTED
    return Wait(timeout, TimeCap(now + timeout, policy.deadline, step.policy, policy.clock))


def _walk(policy: Policy):
    pending = [policy]
    while pending:
        node = pending.pop()
        yield node
        if isinstance(node, Sequence):
            pending.extend(reversed(node.policies))
        elif isinstance(node, TimeCap):
            pending.append(node.inner)


def contains_time_cap(policy: Policy) -> bool:
    """True if a TimeCap appears anywhere in ``policy``."""
    return any(isinstance(node, TimeCap) for node in _walk(policy))


def is_bounded(policy: Policy) -> bool:
    """True if ``policy`` runs out after a finite number of steps."""
    for node in _walk(policy):
        if isinstance(node, (Linear, Exponential)) and node.retries == INFINITY:
            return False
    return True


def all_waits(policy: Policy) -> list[int]:
    """Every wait ``policy`` would produce, in order.

    Time-capped policies depend on real time passing between steps, so they
    are rejected outright, as are policies with unlimited retries.
    """
    if contains_time_cap(policy):
        raise UnsupportedPolicy("all_waits cannot enumerate a time-capped policy")
    if not is_bounded(policy):
        raise UnsupportedPolicy("all_waits cannot enumerate a policy with unlimited retries")

    waits = []
    step = advance(policy)
    while isinstance(step, Wait):
        waits.append(step.duration)
        step = advance(step.policy)
    return waits
