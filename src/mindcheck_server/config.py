"""Server configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

# --- Pagination defaults ---
# Module-level constants read at import time so FastAPI Query() defaults
# can reference them (Query defaults must be static at decoration time).
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS — comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Question catalog YAML (None → packaged default)
    catalog_path: str | None = None

    # Logging
    log_level: str = "INFO"

    # Idle sessions older than this are dropped when a new session is
    # created and on a timer.  0 means sessions live until the process exits.
    session_ttl_minutes: int = 60

    # Gemini model name (None → mindcheck.constants.DEFAULT_MODEL)
    model: str | None = None

    # Guardian alert webhook (None → alerts are only logged)
    guardian_webhook_url: str | None = None
    guardian_webhook_timeout: float = 10.0


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` / ``MINDCHECK_*`` environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        catalog_path=os.getenv("MINDCHECK_CATALOG_PATH") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        session_ttl_minutes=int(os.getenv("SESSION_TTL_MINUTES", "60")),
        model=os.getenv("MINDCHECK_MODEL") or None,
        guardian_webhook_url=os.getenv("GUARDIAN_WEBHOOK_URL") or None,
        guardian_webhook_timeout=float(os.getenv("GUARDIAN_WEBHOOK_TIMEOUT", "10")),
    )
