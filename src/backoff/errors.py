class BackoffError(ValueError):
    """Base class for backoff policy errors."""


class InvalidPolicy(BackoffError):
    """Construction parameters or configuration are malformed."""


class InvalidState(BackoffError):
    """advance() was handed something that is not a policy."""

    def __init__(self, value: object):
        super().__init__(f"not a backoff policy: {value!r}")
        self.value = value


class UnsupportedPolicy(BackoffError):
    """all_waits() cannot enumerate this policy."""
