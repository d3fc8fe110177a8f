"""In-memory session store.

Holds :class:`SessionContext` objects keyed by ``(user_id, session_id)``.
Nothing is written to disk; sessions disappear when the process exits.

Methods are ``async`` so callers can await them the same way they would a
database-backed repository.  The store deliberately avoids business-logic
validation; stage rules belong to the wizard.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from mindcheck.models.session import SessionContext

logger = logging.getLogger(__name__)


class SessionStore:
    """Process-local read/write operations on session contexts."""

    def __init__(self) -> None:
        self._sessions: dict[tuple[str, str], SessionContext] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def add(self, ctx: SessionContext) -> SessionContext:
        """Insert a new context.

        Raises:
            ValueError: if a session with the same key already exists
        """
        key = (ctx.user_id, ctx.session_id)
        if key in self._sessions:
            raise ValueError(
                f"Session already exists: user_id={ctx.user_id}, "
                f"session_id={ctx.session_id}"
            )
        self._sessions[key] = ctx
        return ctx

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, user_id: str, session_id: str) -> SessionContext | None:
        """Fetch a context by ``(user_id, session_id)``; ``None`` if absent."""
        return self._sessions.get((user_id, session_id))

    async def list_by_user(
        self,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[SessionContext]:
        """List a user's sessions, most recent first."""
        rows = [ctx for (uid, _), ctx in self._sessions.items() if uid == user_id]
        rows.sort(key=lambda c: c.created_at, reverse=True)
        return rows[offset:offset + limit]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, user_id: str, session_id: str) -> None:
        """Remove a session.

        Raises:
            ValueError: if the session does not exist
        """
        try:
            del self._sessions[(user_id, session_id)]
        except KeyError:
            raise ValueError(
                f"Session not found: user_id={user_id}, session_id={session_id}"
            ) from None

    async def purge_older_than(self, minutes: int) -> int:
        """Drop sessions idle for more than *minutes*; returns the count."""
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=minutes)
        stale = [k for k, ctx in self._sessions.items() if ctx.updated_at < cutoff]
        for key in stale:
            del self._sessions[key]
        if stale:
            logger.info("Purged %d idle session(s) older than %d minutes", len(stale), minutes)
        return len(stale)
