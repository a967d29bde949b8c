"""Origin policy evaluation.

The evaluator is a pure function over the per-request ``Origin`` header and
the process-wide :class:`PolicyConfiguration`. Allow and deny are both
expressed as a :class:`PolicyDecision`; a disallowed origin is a policy
outcome, never an exception.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowedOriginSet:
    """Ordered, immutable allow-list of origins with exact-match membership."""

    origins: tuple[str, ...] = ()
    _members: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_members", frozenset(self.origins))

    @classmethod
    def of(cls, origins: Iterable[str]) -> "AllowedOriginSet":
        """Build a set from any iterable, dropping duplicates but keeping order."""
        return cls(tuple(dict.fromkeys(origins)))

    def __contains__(self, origin: object) -> bool:
        return origin in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self.origins)

    def __len__(self) -> int:
        return len(self.origins)


@dataclass(frozen=True)
class PolicyConfiguration:
    """Read-only CORS policy, built once at process start."""

    allowed_origins: AllowedOriginSet
    allowed_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    allowed_headers: tuple[str, ...] = ("Content-Type", "Authorization", "X-Requested-With")
    allow_credentials: bool = True
    preflight_status: int = 204


@dataclass(frozen=True)
class PolicyDecision:
    """Per-request outcome of :func:`evaluate`.

    ``allow_origin`` is the origin to echo back, or None when the caller
    sent no origin or sent one outside the allow-list.
    """

    allow_origin: Optional[str]
    allowed_methods: tuple[str, ...]
    allowed_headers: tuple[str, ...]
    allow_credentials: bool

    @property
    def origin_allowed(self) -> bool:
        return self.allow_origin is not None


def evaluate(
    request_origin: Optional[str], config: PolicyConfiguration
) -> PolicyDecision:
    """Decide which CORS headers a request with this origin should receive.

    Args:
        request_origin: Value of the request's ``Origin`` header, or None.
        config: The process-wide policy.

    Returns:
        A fresh :class:`PolicyDecision`. Methods, headers and the credentials
        flag are always copied from config, even when the origin is absent
        or rejected.
    """
    allow_origin: Optional[str] = None
    if request_origin:
        if request_origin in config.allowed_origins:
            # Exact echo, never '*'.
            allow_origin = request_origin
        else:
            logger.debug("Origin %r not in CORS allow-list", request_origin)

    return PolicyDecision(
        allow_origin=allow_origin,
        allowed_methods=config.allowed_methods,
        allowed_headers=config.allowed_headers,
        allow_credentials=config.allow_credentials,
    )
