"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the question catalog and builds the wizard once
  - CORS middleware
  - Global exception handlers (SDK ValueError → 404/409/400,
    ValidationError → 422)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``mindcheck-server`` console-script entry point.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mindcheck.analysis import GeminiClassifier
from mindcheck.catalog import QuestionCatalog
from mindcheck.constants import DEFAULT_MODEL
from mindcheck.errors import ValidationError
from mindcheck.interfaces import Classifier, GuardianNotifier
from mindcheck.notifier import LoggingGuardianNotifier, WebhookGuardianNotifier
from mindcheck.questionnaire import AdaptiveQuestionnaire
from mindcheck.store import SessionStore
from mindcheck.wizard import WellnessWizard

from mindcheck_server.config import ServerSettings, load_settings
from mindcheck_server.errors import (
    generic_error_handler,
    validation_error_handler,
    value_error_handler,
)
from mindcheck_server.routes import register_routes

logger = logging.getLogger(__name__)


def _build_notifier(settings: ServerSettings) -> GuardianNotifier:
    if settings.guardian_webhook_url:
        return WebhookGuardianNotifier(
            settings.guardian_webhook_url,
            timeout=settings.guardian_webhook_timeout,
        )
    logger.warning("GUARDIAN_WEBHOOK_URL not set; guardian alerts will only be logged")
    return LoggingGuardianNotifier()


async def _purge_idle_sessions(store: SessionStore, ttl_minutes: int) -> None:
    """Drop idle sessions every *ttl_minutes* until cancelled."""
    while True:
        await asyncio.sleep(ttl_minutes * 60)
        await store.purge_older_than(ttl_minutes)


# ------------------------------------------------------------------
# Lifespan — runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup.

    Startup:
      1. Load the question catalog YAML
      2. Build the classifier and notifier (unless injected via create_app)
      3. Build the ``WellnessWizard`` and an empty ``SessionStore``
      4. Stash them on ``app.state`` for dependency injection
      5. Start the idle-session purge task when a TTL is configured
    """
    settings: ServerSettings = app.state.settings

    # --- Load catalog ---
    catalog = QuestionCatalog(settings.catalog_path)
    catalog.load()

    # --- Collaborators ---
    classifier: Classifier | None = app.state.classifier
    if classifier is None:
        classifier = GeminiClassifier(
            model=settings.model or DEFAULT_MODEL,
            base_ids=catalog.base_ids,
        )
    notifier: GuardianNotifier | None = app.state.notifier
    if notifier is None:
        notifier = _build_notifier(settings)

    # --- Build wizard ---
    questionnaire = AdaptiveQuestionnaire(catalog)
    app.state.catalog = catalog
    app.state.wizard = WellnessWizard(questionnaire, classifier, notifier)
    app.state.store = SessionStore()
    logger.info("Wellness wizard ready")

    purge_task = None
    if settings.session_ttl_minutes > 0:
        purge_task = asyncio.create_task(
            _purge_idle_sessions(app.state.store, settings.session_ttl_minutes)
        )

    yield

    # --- Shutdown ---
    if purge_task is not None:
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task
    logger.info("Discarding %d in-memory session(s)", len(app.state.store))


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(
    settings: ServerSettings | None = None,
    *,
    classifier: Classifier | None = None,
    notifier: GuardianNotifier | None = None,
) -> FastAPI:
    """Build and return the configured FastAPI application.

    *classifier* and *notifier* override the Gemini classifier and the
    settings-derived notifier (tests pass in-memory doubles).
    """
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Mindcheck API Server",
        description="REST API for the guided wellness self-assessment wizard",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Read by the lifespan handler
    app.state.settings = settings
    app.state.classifier = classifier
    app.state.notifier = notifier

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe: verifies the catalog is loaded."""
        catalog = getattr(app.state, "catalog", None)
        if catalog is None or not catalog.base:
            return {"status": "error", "detail": "question catalog not loaded"}
        return {"status": "ok"}

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn mindcheck_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``mindcheck-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "mindcheck_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
