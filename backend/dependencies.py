"""
Dependency wiring for the FastAPI app: the shared Supabase store and the
session/permission guards used by the routes.
"""

import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request

from backend.session import get_session
from models.data_models import SessionData
from storage.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

UNAUTHORIZED = "Não autorizado."


def get_store(request: Request) -> SupabaseClient:
    """
    Return the app-wide SupabaseClient, creating it on first use.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        config = request.app.state.config
        store = SupabaseClient(
            config.credentials.supabase_url,
            config.credentials.supabase_key
        )
        request.app.state.store = store
    return store


def require_session(request: Request) -> SessionData:
    session = get_session(request)
    if session is None:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)
    return session


def require_admin(session: SessionData = Depends(require_session)) -> SessionData:
    if session.user_type != "admin":
        logger.warning(f"Non-admin session {session.user_id} tried an admin endpoint")
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)
    return session


def require_collaborator(session: SessionData = Depends(require_session)) -> SessionData:
    if session.user_type != "collaborator":
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)
    return session


def require_permission(permission: str, message: str) -> Callable[..., SessionData]:
    """
    Build a dependency that admits administrators holding a permission flag.

    The flag is read from the database on every request, so revoking a
    permission (or deleting the administrator) takes effect at once.

    Args:
        permission: Column name, e.g. 'can_enter_hours'
        message: 403 detail when the flag is missing

    Returns:
        Dependency returning the admin SessionData
    """
    def dependency(
        session: SessionData = Depends(require_admin),
        store: SupabaseClient = Depends(get_store),
    ) -> SessionData:
        try:
            admin = store.get_administrator(session.user_id)
        except Exception as e:
            logger.error(f"Failed to load permissions for admin {session.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Erro interno do servidor.")

        if not admin or not admin.get(permission):
            logger.warning(f"Admin {session.user_id} lacks {permission}")
            raise HTTPException(status_code=403, detail=message)
        return session

    return dependency
