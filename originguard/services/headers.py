"""Render a PolicyDecision into CORS response headers."""

from starlette.datastructures import MutableHeaders

from originguard.services.policy import PolicyDecision

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"


def cors_headers(decision: PolicyDecision) -> list[tuple[str, str]]:
    """Return the CORS headers for a decision, in emission order.

    Headers the decision does not populate are left out entirely: the origin
    header is never sent empty and the credentials header is never sent as
    ``"false"``.
    """
    headers: list[tuple[str, str]] = []
    if decision.allow_origin:
        headers.append((ALLOW_ORIGIN, decision.allow_origin))
    if decision.allowed_methods:
        headers.append((ALLOW_METHODS, ", ".join(decision.allowed_methods)))
    if decision.allowed_headers:
        headers.append((ALLOW_HEADERS, ", ".join(decision.allowed_headers)))
    if decision.allow_credentials:
        headers.append((ALLOW_CREDENTIALS, "true"))
    return headers


def inject_headers(headers: MutableHeaders, decision: PolicyDecision) -> None:
    """Apply a decision to an outgoing response's headers in place.

    The policy layer owns ``Access-Control-Allow-Origin``: a value set by the
    application is dropped when the decision does not allow the origin.
    """
    if not decision.allow_origin and ALLOW_ORIGIN in headers:
        del headers[ALLOW_ORIGIN]

    for name, value in cors_headers(decision):
        headers[name] = value

    if decision.allow_origin:
        headers.add_vary_header("Origin")
