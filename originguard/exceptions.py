"""
originguard exception hierarchy.

All custom exceptions inherit from OriginGuardException so callers can
catch a single base type when they want a broad safety net.
"""

from fastapi import HTTPException


class OriginGuardException(Exception):
    """Base exception for all originguard errors."""


class MisconfigurationError(OriginGuardException, ValueError):
    """Raised at startup when the CORS policy configuration is invalid."""


class PayloadTooLargeError(OriginGuardException, HTTPException):
    """Raised while reading a request body that exceeds the size limit.

    Subclasses HTTPException so FastAPI's body parsing re-raises it instead
    of turning it into a generic 400.
    """

    def __init__(self, max_bytes: int) -> None:
        message = f"Request body exceeds the {max_bytes} byte limit."
        OriginGuardException.__init__(self, message)
        HTTPException.__init__(self, status_code=413, detail=message)
        self.max_bytes = max_bytes

    def __str__(self) -> str:
        return self.detail
