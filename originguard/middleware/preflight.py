"""Terminate CORS preflight (OPTIONS) requests before they reach the app.

Every OPTIONS request ends here with the configured success status and the
policy headers, whether or not the origin is allowed. The browser reads the
headers and makes the allow/deny call itself.
"""

import enum

from starlette.responses import Response

from originguard.services.headers import inject_headers
from originguard.services.policy import PolicyDecision

PREFLIGHT_METHOD = "OPTIONS"


class PreflightState(str, enum.Enum):
    """Where a request stands in the preflight handshake.

    Every request starts PENDING and leaves it exactly once, either
    TERMINATED (answered here) or FORWARDED (handed to the application).
    """

    PENDING = "pending"
    TERMINATED = "terminated"
    FORWARDED = "forwarded"


class PreflightDispatcher:
    """Routes a request out of PENDING and builds the terminal preflight response."""

    def __init__(self, status_code: int = 204) -> None:
        self._status_code = status_code

    @property
    def status_code(self) -> int:
        return self._status_code

    def route(
        self, method: str, state: PreflightState = PreflightState.PENDING
    ) -> PreflightState:
        """TERMINATED for OPTIONS, FORWARDED for anything else.

        Raises:
            ValueError: If the request has already left PENDING.
        """
        if state is not PreflightState.PENDING:
            raise ValueError(f"Request already routed ({state.value})")
        if (method or "").upper() == PREFLIGHT_METHOD:
            return PreflightState.TERMINATED
        return PreflightState.FORWARDED

    def terminate(self, decision: PolicyDecision) -> Response:
        """Empty-bodied response carrying the decision's CORS headers."""
        response = Response(status_code=self._status_code)
        inject_headers(response.headers, decision)
        return response
