import logging
import threading

from src.backoff.config import from_config
from src.backoff.engine import advance
from src.models.policy import Policy, TimeCap, Wait

logger = logging.getLogger(__name__)


class RetryManager:
    """Holds the current backoff policy for one retry loop and hands out waits."""

    # Every second, for as long as the caller keeps asking
    DEFAULT_CONFIG = {"linear": {}}

    def __init__(self, policy: Policy | None = None):
        self.initial_policy = policy if policy is not None else from_config(self.DEFAULT_CONFIG)
        self._policy = self.initial_policy
        self._attempt = 0
        self._exhausted = False
        self._lock = threading.Lock()

    @property
    def attempt(self) -> int:
        """Number of waits handed out so far."""
        with self._lock:
            return self._attempt

    def next_wait(self) -> int | None:
        """Milliseconds to wait before the next attempt, or None when out of retries."""
        with self._lock:
            if self._exhausted:
                return None
            step = advance(self._policy)
            if not isinstance(step, Wait):
                logger.debug("retries exhausted after %d attempts", self._attempt)
                self._exhausted = True
                return None
            self._policy = step.policy
            self._attempt += 1
            return step.duration

    def next_delay(self) -> float | None:
        """Same as next_wait(), in seconds, ready for time.sleep()."""
        wait = self.next_wait()
        if wait is None:
            return None
        return wait / 1000

    def has_attempts_remaining(self) -> bool:
        with self._lock:
            return not self._exhausted

    def reset(self) -> None:
        """Start over from the initial policy.

        A time-capped initial policy gets its full budget again, counted from
        now. Caps nested deeper keep their original deadlines.
        """
        with self._lock:
            policy = self.initial_policy
            if isinstance(policy, TimeCap):
                now = policy.clock()
                policy = TimeCap(now, now + (policy.deadline - policy.last_tick), policy.inner, policy.clock)
                self.initial_policy = policy
            self._policy = policy
            self._attempt = 0
            self._exhausted = False
