"""Exception handlers installed by ``create_app``.

Wizard and store operations signal misuse with ``ValueError``: an unknown or
duplicate session, a transition attempted from the wrong stage, or an answer
for a question that is not on screen.  The status code is chosen from the
message text so routes can stay free of try/except blocks.

Registration failures (``mindcheck.errors.ValidationError``) carry a message
meant for the person filling in the form and are passed through unchanged.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from mindcheck.errors import ValidationError

logger = logging.getLogger(__name__)

# (message fragment, status, detail sent to the client); first match wins
_VALUE_ERROR_RULES: list[tuple[str, int, str]] = [
    ("already exists", 409, "Session already exists"),
    ("not found", 404, "Session not found"),
    ("only valid during", 400, "Not allowed at the current step"),
]

_FALLBACK = (400, "Invalid request")


def _classify_value_error(message: str) -> tuple[int, str]:
    lowered = message.lower()
    for fragment, status, detail in _VALUE_ERROR_RULES:
        if fragment in lowered:
            return status, detail
    return _FALLBACK


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Translate a ``ValueError`` into 409, 404 or 400.

    Only a fixed detail string reaches the client; the original message names
    user and session ids and is kept in the server log.
    """
    status, detail = _classify_value_error(str(exc))
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status, exc)
    return JSONResponse(status_code=status, content={"detail": detail})


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    logger.info("%s %s -> 422: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s -> 500", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
