import pytest

from src.backoff.retry import RetryManager
from src.utils.factories import FakeClock, PolicyFactory


@pytest.fixture
def fake_clock():
    return FakeClock(start_ms=10_000)


@pytest.fixture
def retry_manager():
    return RetryManager()


@pytest.fixture
def policy_factory():
    return PolicyFactory
