"""
Signed-cookie sessions.

The session is a JSON blob kept in the "session" cookie and signed by
Starlette's SessionMiddleware (itsdangerous), so it cannot be forged or
edited client-side. The payload is SessionData: user_id, user_type, role
and, during a collaborator's first login, pending_access_code.
"""

import logging
from typing import Optional
from fastapi import Request
from pydantic import ValidationError

from models.data_models import SessionData

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"


def set_session(request: Request, user_id: str, user_type: str, pending_access_code: bool = False) -> SessionData:
    """
    Start a new session for a user, replacing whatever was there.

    Args:
        request: Current request (its session is rewritten)
        user_id: Administrator or collaborator ID
        user_type: 'admin' or 'collaborator' (also stored as the role)
        pending_access_code: Collaborator still has to register an access code

    Returns:
        The stored SessionData
    """
    data = SessionData(
        user_id=str(user_id),
        user_type=user_type,
        role=user_type,
        pending_access_code=pending_access_code,
    )
    payload = data.model_dump()
    if not pending_access_code:
        payload.pop("pending_access_code")

    request.session.clear()
    request.session.update(payload)
    return data


def get_session(request: Request) -> Optional[SessionData]:
    """Read the current session; None when absent or unreadable."""
    if not request.session:
        return None
    try:
        return SessionData(**request.session)
    except ValidationError as e:
        logger.warning(f"Discarding malformed session payload: {e.errors()}")
        return None


def clear_pending_access_code(request: Request) -> bool:
    """
    Drop the pending_access_code flag.

    Returns:
        True if the flag was set and has been removed
    """
    session = get_session(request)
    if not session or not session.pending_access_code:
        return False
    set_session(request, session.user_id, session.user_type)
    return True


def delete_session(request: Request) -> None:
    request.session.clear()
