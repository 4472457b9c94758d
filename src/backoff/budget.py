"""Closed-form retry counts for a total time budget.

Neither function simulates the schedule: the linear model is a plain division
and the exponential model inverts the geometric series sum, switching to a
fixed rate once the wait reaches ``max_timeout``.
"""

import logging
import math

from src.backoff.errors import InvalidPolicy
from src.models.policy import INFINITY

logger = logging.getLogger(__name__)


def _check_budget(budget) -> None:
    if isinstance(budget, bool) or not isinstance(budget, int) or budget < 0:
        raise InvalidPolicy(f"max_total_timeout must be an integer >= 0, got {budget!r}")


def linear_retries(budget: int, timeout: int) -> int:
    """Number of ``timeout`` waits that fit in ``budget``."""
    _check_budget(budget)
    if timeout <= 0:
        raise InvalidPolicy("timeout must be > 0 to derive retries from max_total_timeout")
    retries = budget // timeout
    logger.debug("derived %d linear retries from budget %d ms", retries, budget)
    return retries


def exponential_retries(
    budget: int,
    factor: float,
    timeout: int,
    max_timeout: int | float = INFINITY,
) -> int:
    """Number of growing waits that fit in ``budget``.

    With no effective growth (``factor == 1`` or a cap at or below the first
    wait) this is the linear case. Otherwise ``n`` is the step count under
    uncapped growth and ``m`` the 1-based step where the wait first reaches
    the cap; if the budget runs out before ``m`` the answer is ``n``, else the
    first ``m - 1`` geometric steps are paid for and the remainder is spent at
    ``max_timeout`` per step.
    """
    _check_budget(budget)

    if factor == 1 or max_timeout <= timeout:
        wait = min(timeout, max_timeout)
        if wait <= 0:
            raise InvalidPolicy("effective timeout must be > 0 to derive retries from max_total_timeout")
        return _clamp(math.trunc(budget / wait), budget)

    if timeout <= 0:
        raise InvalidPolicy("timeout must be > 0 to derive retries from max_total_timeout")
    if factor < 1:
        raise InvalidPolicy("factor must be >= 1 to derive retries from max_total_timeout")

    b1, q = timeout, factor
    n = math.trunc(math.log(budget * (q - 1) / b1 + 1) / math.log(q))
    if max_timeout == INFINITY:
        return _clamp(n, budget)

    m = math.trunc(math.log(max_timeout / b1) / math.log(q) + 1)
    if n < m:
        return _clamp(n, budget)

    geometric = b1 * (q ** (m - 1) - 1) / (q - 1)
    return _clamp(math.trunc((budget - geometric + (m - 1) * max_timeout) / max_timeout), budget)


def _clamp(retries: int, budget: int) -> int:
    retries = max(0, retries)
    logger.debug("derived %d exponential retries from budget %d ms", retries, budget)
    return retries
