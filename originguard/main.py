"""FastAPI application factory for originguard."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from originguard import __version__
from originguard.api import greet
from originguard.config import Settings, get_settings, load_policy
from originguard.exceptions import OriginGuardException, PayloadTooLargeError
from originguard.middleware.body_limit import BodySizeLimitMiddleware
from originguard.middleware.cors_policy import CORSPolicyMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The CORS policy is built here, once. A misconfigured allow-list raises
    MisconfigurationError and the process never starts serving.
    """
    settings = settings or get_settings()
    policy = load_policy(settings)
    logger.info(
        "CORS env=%s allow_origins=%s allow_credentials=%s preflight_status=%d",
        settings.app_env,
        list(policy.allowed_origins),
        policy.allow_credentials,
        policy.preflight_status,
    )

    app = FastAPI(
        title="originguard",
        version=__version__,
        description="Cross-origin policy enforcement in front of an HTTP API.",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.policy = policy

    # Last added runs first: CORS policy is outermost.
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(CORSPolicyMiddleware, policy=policy)

    @app.exception_handler(OriginGuardException)
    async def originguard_exception_handler(
        request: Request, exc: OriginGuardException
    ) -> JSONResponse:
        """Handle all OriginGuardException subclasses with consistent JSON."""
        status_map = {PayloadTooLargeError: 413}
        code_map = {PayloadTooLargeError: "payload_too_large"}
        status_code = status_map.get(type(exc), 500)
        if status_code >= 500:
            logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(
            {
                "error": {
                    "code": code_map.get(type(exc), "internal_error"),
                    "message": str(exc),
                    "type": type(exc).__name__,
                }
            },
            status_code=status_code,
        )

    app.include_router(greet.router, tags=["greet"])

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "version": __version__,
            "environment": settings.app_env,
            "cors_origins": list(policy.allowed_origins),
        }

    return app


app = create_app()
