"""Build policies from plain configuration mappings.

A configuration names exactly one policy kind and may add a ``timecap``::

    {"exponential": {"retries": 5, "factor": 2, "timeout": 500}, "timecap": 30000}
    {"sequence": [{"intervals": [100, 200]}, {"linear": {"timeout": 1000}}]}
    {"linear": {"retries": {"max_total_timeout": 10000}, "timeout": 500}}
"""

from collections.abc import Mapping

from src.backoff.clock import Clock, monotonic_ms
from src.backoff.constructors import exponential, intervals, linear, sequence, with_time_cap
from src.backoff.errors import InvalidPolicy
from src.models.policy import INFINITY, MaxTotalTimeout, Policy

DEFAULT_RETRIES = INFINITY
DEFAULT_LINEAR_TIMEOUT = 1000
DEFAULT_EXPONENTIAL_FACTOR = 2
DEFAULT_EXPONENTIAL_TIMEOUT = 1000
DEFAULT_MAX_TIMEOUT = INFINITY

POLICY_KINDS = ("sequence", "linear", "exponential", "intervals")

_LINEAR_KEYS = {"retries", "timeout"}
_EXPONENTIAL_KEYS = {"retries", "factor", "timeout", "max_timeout"}


def from_config(config: Mapping, clock: Clock = monotonic_ms) -> Policy:
    """Build the policy described by ``config``.

    Raises InvalidPolicy when the mapping is malformed or its parameters are.
    """
    if not isinstance(config, Mapping):
        raise InvalidPolicy(f"policy config must be a mapping, got {config!r}")

    kinds = [key for key in POLICY_KINDS if key in config]
    if len(kinds) != 1:
        raise InvalidPolicy(f"policy config needs exactly one of {', '.join(POLICY_KINDS)}, got {sorted(config)}")
    unknown = set(config) - set(POLICY_KINDS) - {"timecap"}
    if unknown:
        raise InvalidPolicy(f"unknown policy config keys: {sorted(unknown)}")

    kind = kinds[0]
    params = config[kind]
    if kind == "sequence":
        policy = _build_sequence(params, clock)
    elif kind == "linear":
        params = _params(kind, params, _LINEAR_KEYS)
        policy = linear(
            _retries(params.get("retries", DEFAULT_RETRIES)),
            params.get("timeout", DEFAULT_LINEAR_TIMEOUT),
        )
    elif kind == "exponential":
        params = _params(kind, params, _EXPONENTIAL_KEYS)
        policy = exponential(
            _retries(params.get("retries", DEFAULT_RETRIES)),
            params.get("factor", DEFAULT_EXPONENTIAL_FACTOR),
            params.get("timeout", DEFAULT_EXPONENTIAL_TIMEOUT),
            _unbounded(params.get("max_timeout", DEFAULT_MAX_TIMEOUT)),
        )
    else:
        if not isinstance(params, (list, tuple)):
            raise InvalidPolicy(f"intervals config must be a list, got {params!r}")
        policy = intervals(params)

    return with_time_cap(_unbounded(config.get("timecap")), policy, clock)


def _build_sequence(entries, clock: Clock) -> Policy:
    if not isinstance(entries, (list, tuple)):
        raise InvalidPolicy(f"sequence config must be a list, got {entries!r}")
    return sequence([from_config(entry, clock) for entry in entries])


def _params(kind: str, params, allowed: set[str]) -> Mapping:
    if not isinstance(params, Mapping):
        raise InvalidPolicy(f"{kind} config must be a mapping, got {params!r}")
    unknown = set(params) - allowed
    if unknown:
        raise InvalidPolicy(f"unknown {kind} config keys: {sorted(unknown)}")
    return params


def _unbounded(value):
    if value == "infinity":
        return INFINITY
    return value


def _retries(value):
    """Normalise the accepted spellings of a retry count."""
    if isinstance(value, Mapping):
        if set(value) != {"max_total_timeout"}:
            raise InvalidPolicy(f"retries mapping must only hold max_total_timeout, got {dict(value)!r}")
        return MaxTotalTimeout(value["max_total_timeout"])
    if isinstance(value, (list, tuple)):
        if len(value) != 2 or value[0] != "max_total_timeout":
            raise InvalidPolicy(f"retries pair must be ('max_total_timeout', budget), got {value!r}")
        return MaxTotalTimeout(value[1])
    return _unbounded(value)
