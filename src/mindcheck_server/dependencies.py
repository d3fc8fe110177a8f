"""FastAPI dependency injection — provides the wizard, store, catalog and user identity.

Shared objects are built once in the lifespan handler and stashed on
``app.state``.  ``get_session`` loads the caller's session context so route
handlers receive it ready to pass into a wizard transition.
"""

from fastapi import Depends, Header, HTTPException, Request

from mindcheck.catalog import QuestionCatalog
from mindcheck.models.session import SessionContext
from mindcheck.store import SessionStore
from mindcheck.wizard import WellnessWizard


# ------------------------------------------------------------------
# Shared singletons — stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_wizard(request: Request) -> WellnessWizard:
    """Return the wizard singleton from ``app.state``."""
    return request.app.state.wizard


def get_store(request: Request) -> SessionStore:
    """Return the session store singleton from ``app.state``."""
    return request.app.state.store


def get_catalog(request: Request) -> QuestionCatalog:
    """Return the question catalog singleton from ``app.state``."""
    return request.app.state.catalog


# ------------------------------------------------------------------
# User identity — extracted from the X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    x_user_id: str | None = Header(None, alias="X-User-ID"),
) -> str:
    """Extract user identity from the ``X-User-ID`` header.

    Returns 401 if the header is missing; every session endpoint
    requires a known caller.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")
    return x_user_id


# ------------------------------------------------------------------
# Session context
# ------------------------------------------------------------------

async def get_session(
    session_id: str,
    user_id: str = Depends(get_user_id),
    store: SessionStore = Depends(get_store),
) -> SessionContext:
    """Load the caller's session or raise (mapped to 404)."""
    ctx = await store.get(user_id, session_id)
    if ctx is None:
        raise ValueError(
            f"Session not found: user_id={user_id}, session_id={session_id}"
        )
    return ctx
