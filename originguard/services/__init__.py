"""Origin policy evaluation and CORS header rendering."""

from originguard.services.headers import cors_headers, inject_headers
from originguard.services.policy import (
    AllowedOriginSet,
    PolicyConfiguration,
    PolicyDecision,
    evaluate,
)

__all__ = [
    "AllowedOriginSet",
    "PolicyConfiguration",
    "PolicyDecision",
    "evaluate",
    "cors_headers",
    "inject_headers",
]
