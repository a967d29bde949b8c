"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and .env file support.
Access the singleton via get_settings(); turn it into the immutable CORS
policy with load_policy(), which fails fast on a broken allow-list.
"""

import json
import logging
from functools import lru_cache
from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict

from originguard.exceptions import MisconfigurationError
from originguard.services.policy import AllowedOriginSet, PolicyConfiguration

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("development", "production")
PREFLIGHT_STATUSES = (200, 204)
DEFAULT_PORTS = {"http": 80, "https": 443}


class Settings(BaseSettings):
    """Central configuration for the originguard API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Selects which origin list applies: development or production.
    app_env: str = "development"

    # CORS origin lists. Comma-separated or a JSON array:
    #   CORS_PROD_ORIGINS=https://app.example.com,https://admin.example.com
    #   CORS_PROD_ORIGINS=["https://app.example.com"]
    # Stored as str so pydantic-settings doesn't JSON-decode plain comma values.
    cors_dev_origins: str = "http://localhost:5173"
    cors_prod_origins: str = "https://www.your-production-frontend.com"
    # Explicit override; wins over both lists when non-empty.
    cors_origins: str = ""

    cors_allow_methods: str = "GET, POST, PUT, DELETE, OPTIONS"
    cors_allow_headers: str = "Content-Type, Authorization, X-Requested-With"
    cors_allow_credentials: bool = True
    cors_preflight_status: int = 204

    # Request bodies above this size are rejected with 413.
    max_body_bytes: int = 25 * 1024 * 1024

    debug: bool = False
    log_level: str = "info"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 5000

    def get_cors_origins(self) -> list[str]:
        """Raw origin entries for the active environment, unvalidated."""
        if self.cors_origins.strip():
            return split_list(self.cors_origins)
        if self.app_env.strip().lower() == "production":
            return split_list(self.cors_prod_origins)
        return split_list(self.cors_dev_origins)


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings singleton."""
    return Settings()


def reset_settings() -> None:
    """Clear the settings cache. Used in tests."""
    get_settings.cache_clear()


def split_list(value: str) -> list[str]:
    """Parse a JSON array or comma-separated string into stripped items.

    Empty items are kept as "" so that validation can reject them.
    """
    v = value.strip()
    if not v:
        return []
    if v.startswith("["):
        try:
            items = json.loads(v)
        except json.JSONDecodeError as exc:
            raise MisconfigurationError(f"Invalid JSON list: {value!r}") from exc
        if not isinstance(items, list):
            raise MisconfigurationError(f"Expected a JSON array: {value!r}")
        return [x.strip() if isinstance(x, str) else "" for x in items]
    return [x.strip() for x in v.split(",")]


def normalize_origin(entry: str) -> str:
    """Validate one allow-list entry and return its canonical form.

    Accepts ``http(s)://host[:port]`` with an optional trailing slash.
    Scheme and host are lower-cased and a default port (80 for http, 443
    for https) is dropped, since browsers send origins that way.

    Raises:
        MisconfigurationError: If the entry is not a plain origin.
    """
    if not entry:
        raise MisconfigurationError("Empty entry in CORS allowed origins")
    if entry == "*":
        raise MisconfigurationError(
            "Wildcard '*' is not supported in CORS allowed origins; list exact origins"
        )
    if entry.lower() == "null":
        raise MisconfigurationError("'null' is not a valid CORS allowed origin")

    parts = urlsplit(entry.rstrip("/"))
    try:
        port = parts.port
    except ValueError as exc:
        raise MisconfigurationError(f"Invalid port in CORS origin {entry!r}") from exc

    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        raise MisconfigurationError(
            f"CORS origin {entry!r} must look like http(s)://host[:port]"
        )
    if parts.path or parts.query or parts.fragment or "@" in parts.netloc:
        raise MisconfigurationError(
            f"CORS origin {entry!r} must not contain a path, query, fragment or credentials"
        )
    if any(ch.isspace() for ch in entry):
        raise MisconfigurationError(f"CORS origin {entry!r} contains whitespace")

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    scheme = parts.scheme.lower()
    origin = f"{scheme}://{host}"
    # Browsers omit the default port from Origin.
    if port is not None and port != DEFAULT_PORTS[scheme]:
        origin = f"{origin}:{port}"
    return origin


def _tokens(value: str, what: str) -> tuple[str, ...]:
    items = split_list(value)
    if any(not item for item in items):
        raise MisconfigurationError(f"Empty entry in CORS allowed {what}: {value!r}")
    return tuple(dict.fromkeys(items))


def load_policy(settings: Settings) -> PolicyConfiguration:
    """Build the immutable CORS policy from settings.

    Called once at process start by the application factory.

    Raises:
        MisconfigurationError: On an unknown environment, an empty or
            malformed origin list, empty method/header entries, or an
            unsupported preflight status.
    """
    env = settings.app_env.strip().lower()
    if env not in ENVIRONMENTS:
        raise MisconfigurationError(
            f"APP_ENV must be one of {', '.join(ENVIRONMENTS)}, got {settings.app_env!r}"
        )

    raw_origins = settings.get_cors_origins()
    if not raw_origins:
        raise MisconfigurationError(f"No CORS allowed origins configured for {env}")
    origins = AllowedOriginSet.of(normalize_origin(o) for o in raw_origins)

    methods = tuple(
        dict.fromkeys(m.upper() for m in _tokens(settings.cors_allow_methods, "methods"))
    )
    headers = _tokens(settings.cors_allow_headers, "headers")

    if settings.cors_preflight_status not in PREFLIGHT_STATUSES:
        raise MisconfigurationError(
            f"CORS_PREFLIGHT_STATUS must be 200 or 204, got {settings.cors_preflight_status}"
        )

    return PolicyConfiguration(
        allowed_origins=origins,
        allowed_methods=methods,
        allowed_headers=headers,
        allow_credentials=settings.cors_allow_credentials,
        preflight_status=settings.cors_preflight_status,
    )
