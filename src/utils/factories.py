from src.backoff.constructors import exponential, intervals, linear, sequence, with_time_cap
from src.models.policy import INFINITY, Policy


class FakeClock:
    """Deterministic millisecond clock for driving time-capped policies."""

    def __init__(self, start_ms: int = 0):
        self.now_ms = start_ms
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now_ms

    def advance(self, ms: int) -> int:
        if ms < 0:
            raise ValueError("a monotonic clock cannot go backwards")
        self.now_ms += ms
        return self.now_ms


class PolicyFactory:
    """Factory for creating policies with sensible defaults."""

    @staticmethod
    def linear(**overrides) -> Policy:
        defaults = {"retries": 3, "timeout": 100}
        defaults.update(overrides)
        return linear(**defaults)

    @staticmethod
    def exponential(**overrides) -> Policy:
        defaults = {"retries": 4, "factor": 2, "timeout": 100, "max_timeout": INFINITY}
        defaults.update(overrides)
        return exponential(**defaults)

    @staticmethod
    def intervals(durations: list[int] | None = None) -> Policy:
        return intervals(durations or [50, 200, 1000])

    @staticmethod
    def sequence(*policies: Policy) -> Policy:
        if not policies:
            policies = (PolicyFactory.intervals([10, 20]), PolicyFactory.linear(retries=2, timeout=30))
        return sequence(policies)

    @staticmethod
    def capped(budget: int, policy: Policy | None = None, clock=None) -> Policy:
        clock = clock or FakeClock()
        return with_time_cap(budget, policy or PolicyFactory.linear(retries=INFINITY), clock)
