"""
Admin routes for collaborator requests: leave requests and access code
reset requests.

Both flip a pending request to approved or rejected (once) and notify the
collaborator.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_store, require_admin, require_permission
from models.data_models import DECISION_STATUSES, ResetDecision, SessionData, StatusDecision
from storage.supabase_client import DuplicateRecordError, SupabaseClient
from timebank import notices

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-requests"])

ACCESS_CODE_IN_USE = "Este código de acesso já está em uso por outro colaborador."
INVALID_STATUS = "Status inválido."


# ============================================================================
# Leave requests
# ============================================================================

@router.get("/leave-requests")
def list_leave_requests(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    try:
        return {"leaveRequests": store.list_leave_requests()}
    except Exception as e:
        logger.error(f"Failed to list leave requests: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar solicitações de folga.")


@router.post("/leave-requests/{request_id}/approve-reject")
def decide_leave_request(
    request_id: str,
    body: StatusDecision,
    session: SessionData = Depends(require_permission(
        "can_enter_hours", "Você não tem permissão para gerenciar solicitações de folga."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """
    Approve or reject a pending leave request.

    Request Body:
    - status: 'approved' or 'rejected'

    Raises:
    - 400: invalid status
    - 404: unknown request
    - 409: request was already decided
    """
    if body.status not in DECISION_STATUSES:
        raise HTTPException(status_code=400, detail=INVALID_STATUS)

    try:
        leave_request = store.get_leave_request(request_id)
        if not leave_request:
            raise HTTPException(status_code=404, detail="Solicitação de folga não encontrada.")
        if leave_request.get("status") != "pending":
            raise HTTPException(status_code=409, detail="Esta solicitação de folga já foi processada.")

        updated = store.set_leave_request_status(request_id, body.status) or dict(leave_request, status=body.status)

        store.create_notification(
            user_id=leave_request["collaborator_id"],
            user_type="collaborator",
            message=notices.leave_decision_message(
                leave_request["start_date"], leave_request["end_date"], body.status
            ),
            notification_type=notices.LEAVE_REQUEST_STATUS,
            related_id=request_id,
        )

        logger.info(f"Admin {session.user_id} set leave request {request_id} to {body.status}")
        return {"message": "Status da solicitação de folga atualizado com sucesso.", "request": updated}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to decide leave request {request_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao atualizar solicitação de folga.")


# ============================================================================
# Access code reset requests
# ============================================================================

@router.get("/access-code-reset-requests")
def list_reset_requests(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    try:
        return {"requests": store.list_reset_requests()}
    except Exception as e:
        logger.error(f"Failed to list access code reset requests: {e}")
        raise HTTPException(
            status_code=500,
            detail="Falha ao carregar solicitações de redefinição de código de acesso."
        )


@router.post("/access-code-reset-requests/{request_id}/approve-reject")
def decide_reset_request(
    request_id: str,
    body: ResetDecision,
    session: SessionData = Depends(require_permission(
        "can_change_access_code",
        "Você não tem permissão para gerenciar solicitações de redefinição de código de acesso."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """
    Approve (with a new access code) or reject a reset request.

    Request Body:
    - status: 'approved' or 'rejected'
    - newAccessCode: required when approving; must not belong to another collaborator
    - notes: optional, shown to the collaborator on rejection

    Everything is validated before anything is written, so a failed
    approval leaves the request pending.
    """
    if body.status not in DECISION_STATUSES:
        raise HTTPException(status_code=400, detail=INVALID_STATUS)
    if body.status == "approved" and not body.new_access_code:
        raise HTTPException(status_code=400, detail="Novo código de acesso é obrigatório para aprovação.")

    try:
        reset_request = store.get_reset_request(request_id)
        if not reset_request:
            raise HTTPException(status_code=404, detail="Solicitação não encontrada.")
        if reset_request.get("status") != "pending":
            raise HTTPException(status_code=409, detail="Esta solicitação já foi processada.")

        collaborator_id = reset_request["collaborator_id"]

        if body.status == "approved":
            if store.find_collaborator_by_access_code(body.new_access_code, exclude_id=collaborator_id):
                raise HTTPException(status_code=409, detail=ACCESS_CODE_IN_USE)
            store.update_collaborator(collaborator_id, {"access_code": body.new_access_code})

        store.process_reset_request(request_id, body.status, session.user_id, body.notes)

        store.create_notification(
            user_id=collaborator_id,
            user_type="collaborator",
            message=notices.reset_decision_message(body.status, body.new_access_code, body.notes),
            notification_type=notices.ACCESS_CODE_RESET_STATUS,
            related_id=request_id,
        )

        logger.info(f"Admin {session.user_id} set access code reset request {request_id} to {body.status}")
        return {"message": "Status da solicitação de redefinição de código de acesso atualizado com sucesso."}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=409, detail=ACCESS_CODE_IN_USE)
    except Exception as e:
        logger.error(f"Failed to decide access code reset request {request_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Falha ao atualizar solicitação de redefinição de código de acesso."
        )
