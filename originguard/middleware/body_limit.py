"""Reject request bodies larger than the configured limit.

Two checks:
1. A declared ``Content-Length`` over the limit gets 413 before the app runs;
   a malformed or negative one gets 400.
2. Bodies without a usable length (chunked, streamed) are counted as they are
   received; crossing the limit raises PayloadTooLargeError, which the app's
   exception handler renders as 413.

Plain ASGI middleware, since it has to wrap ``receive``.
"""

import logging
from typing import Any, Dict

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from originguard.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """Caps the number of request body bytes the application may read."""

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self._max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        raw = Headers(scope=scope).get("content-length")
        if raw is not None:
            try:
                length = int(raw)
            except ValueError:
                length = -1
            if length < 0:
                response = _error(
                    400,
                    "invalid_content_length",
                    "Content-Length must be a non-negative integer.",
                )
                await response(scope, receive, send)
                return
            if length > self._max_bytes:
                logger.warning(
                    "Rejected %s %s: body of %d bytes exceeds limit of %d",
                    scope.get("method"),
                    scope.get("path"),
                    length,
                    self._max_bytes,
                )
                response = _error(
                    413,
                    "payload_too_large",
                    f"Request body exceeds the {self._max_bytes} byte limit.",
                )
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Dict[str, Any]:
            nonlocal received
            message = await receive()
            if message.get("type") == "http.request":
                received += len(message.get("body", b""))
                if received > self._max_bytes:
                    logger.warning(
                        "Rejected %s %s: streamed body exceeds limit of %d",
                        scope.get("method"),
                        scope.get("path"),
                        self._max_bytes,
                    )
                    raise PayloadTooLargeError(self._max_bytes)
            return message

        await self.app(scope, limited_receive, send)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        {
            "error": {
                "code": code,
                "message": message,
                "type": "invalid_request_error",
            }
        },
        status_code=status_code,
    )
