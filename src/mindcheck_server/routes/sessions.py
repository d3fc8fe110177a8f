"""Session management endpoints — create, get, list and discard sessions.

All endpoints require the ``X-User-ID`` header for user identification.
Session identity is the (user_id, session_id) pair.
"""

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from mindcheck.models.session import SessionContext, SessionInfo
from mindcheck.store import SessionStore
from mindcheck.wizard import WellnessWizard

from mindcheck_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from mindcheck_server.dependencies import (
    get_session,
    get_store,
    get_user_id,
    get_wizard,
)

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    """Body for POST /sessions."""
    session_id: str


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    store: SessionStore = Depends(get_store),
    wizard: WellnessWizard = Depends(get_wizard),
) -> SessionInfo:
    """Create a new session at the Consent stage.

    Returns 201 on success.  Raises 409 if a session with the same
    (user_id, session_id) already exists.
    """
    ttl = request.app.state.settings.session_ttl_minutes
    if ttl > 0:
        await store.purge_older_than(ttl)

    ctx = wizard.new_session(user_id=user_id, session_id=body.session_id)
    await store.add(ctx)
    return wizard.session_info(ctx)


@router.get("/sessions/{session_id}")
async def get_session_info(
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> SessionInfo:
    """Get session info by session_id.  Raises 404 if absent."""
    return wizard.session_info(ctx)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    user_id: str = Depends(get_user_id),
    store: SessionStore = Depends(get_store),
) -> None:
    """Discard a session and everything recorded in it.

    Returns 204 on success, 404 if the session does not exist.
    """
    await store.delete(user_id, session_id)


@router.get("/sessions")
async def list_sessions(
    user_id: str = Depends(get_user_id),
    store: SessionStore = Depends(get_store),
    wizard: WellnessWizard = Depends(get_wizard),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> list[SessionInfo]:
    """List sessions for the current user, most recent first."""
    rows = await store.list_by_user(user_id, limit=limit, offset=offset)
    return [wizard.session_info(ctx) for ctx in rows]
