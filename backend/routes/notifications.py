"""
In-app notifications.

Collaborators are notified when an administrator decides one of their
requests; administrators can send test notifications to anyone.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import (
    get_store,
    require_admin,
    require_collaborator,
    require_permission,
    require_session,
)
from models.data_models import MarkReadRequest, SendTestNotificationRequest, SessionData
from storage.supabase_client import SupabaseClient
from timebank.notices import TEST_NOTIFICATION

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["notifications"])

RECIPIENT_TYPES = ("admin", "collaborator")


@router.get("/notifications/admin")
def list_admin_notifications(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    """The administrator's latest unread notifications."""
    try:
        return store.list_notifications(session.user_id, "admin", unread_only=True)
    except Exception as e:
        logger.error(f"Failed to load notifications for admin {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar notificações.")


@router.get("/notifications/collaborator")
def list_collaborator_notifications(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """The collaborator's latest notifications, read or not."""
    try:
        return store.list_notifications(session.user_id, "collaborator")
    except Exception as e:
        logger.error(f"Failed to load notifications for collaborator {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar notificações.")


@router.post("/notifications/mark-read")
def mark_read(
    body: MarkReadRequest,
    session: SessionData = Depends(require_session),
    store: SupabaseClient = Depends(get_store),
):
    if not body.notification_ids:
        raise HTTPException(status_code=400, detail="IDs de notificação inválidos.")

    try:
        updated = store.mark_notifications_read(body.notification_ids, session.user_id, session.user_type)
        return {"message": "Notificações marcadas como lidas.", "updated": updated}
    except Exception as e:
        logger.error(f"Failed to mark notifications as read for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao marcar notificações como lidas.")


@router.post("/admin/send-test-notification")
def send_test_notification(
    body: SendTestNotificationRequest,
    session: SessionData = Depends(require_permission(
        "can_create_admin", "Você não tem permissão para enviar notificações de teste."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """
    Send a test notification to an administrator or collaborator.

    Request Body:
    - recipientId: required
    - recipientType: 'admin' or 'collaborator'
    - message: required
    """
    if not body.recipient_id or not body.recipient_type or not body.message:
        raise HTTPException(status_code=400, detail="ID do destinatário, tipo e mensagem são obrigatórios.")
    if body.recipient_type not in RECIPIENT_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de destinatário inválido.")

    try:
        if body.recipient_type == "admin":
            recipient = store.get_administrator(body.recipient_id)
        else:
            recipient = store.get_collaborator(body.recipient_id, "id")
        if not recipient:
            raise HTTPException(status_code=404, detail="Destinatário não encontrado.")

        notification = store.create_notification(
            user_id=body.recipient_id,
            user_type=body.recipient_type,
            message=body.message,
            notification_type=TEST_NOTIFICATION,
        )
        logger.info(f"Admin {session.user_id} sent a test notification to {body.recipient_type} {body.recipient_id}")
        return {"message": "Notificação de teste enviada com sucesso.", "notification": notification}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to send test notification: {e}")
        raise HTTPException(status_code=500, detail="Falha ao enviar notificação de teste.")
