"""Origin-policy enforcement middleware.

Order of operations per request:
1. Evaluate the ``Origin`` header against the allow-list.
2. OPTIONS: answer the preflight here with the decision's headers.
3. Anything else: forward to the application, then attach the headers.
   An unhandled application error becomes a 500 that still carries them.

Register it last so it runs first (outermost); responses produced by inner
middleware, such as 413s from the body limit, then carry CORS headers too.
"""

import logging

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from originguard.middleware.preflight import PreflightDispatcher, PreflightState
from originguard.services.headers import inject_headers
from originguard.services.policy import PolicyConfiguration, evaluate

logger = logging.getLogger(__name__)


class CORSPolicyMiddleware(BaseHTTPMiddleware):
    """Apply a fixed PolicyConfiguration to every HTTP request."""

    def __init__(self, app: ASGIApp, policy: PolicyConfiguration) -> None:
        super().__init__(app)
        self._policy = policy
        self._preflight = PreflightDispatcher(status_code=policy.preflight_status)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        decision = evaluate(request.headers.get("origin"), self._policy)

        if self._preflight.route(request.method) is PreflightState.TERMINATED:
            logger.debug(
                "Preflight %s origin=%s allowed=%s",
                request.url.path,
                request.headers.get("origin"),
                decision.origin_allowed,
            )
            return self._preflight.terminate(decision)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = JSONResponse(
                {
                    "error": {
                        "code": "internal_error",
                        "message": "Internal server error.",
                        "type": "server_error",
                    }
                },
                status_code=500,
            )
        inject_headers(response.headers, decision)
        return response
