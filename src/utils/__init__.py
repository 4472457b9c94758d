from .factories import FakeClock, PolicyFactory

__all__ = [
    "FakeClock", "PolicyFactory",
]
