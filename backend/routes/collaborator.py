"""
Collaborator self-service routes.

Everything here acts on the logged-in collaborator only (the ID always
comes from the session, never from the request).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from backend.dependencies import get_store, require_collaborator
from backend.session import set_session
from models.data_models import LeaveRequestCreate, SessionData, SetAccessCodeRequest
from storage.supabase_client import DuplicateRecordError, SupabaseClient
from timebank.ledger import time_remaining

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["collaborator"])

MIN_ACCESS_CODE_LENGTH = 4


@router.get("/collaborator-data")
def get_collaborator_data(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """The collaborator's profile and current balance."""
    try:
        collaborator = store.get_collaborator(
            session.user_id, "id, full_name, badge_number, balance_hours, direct_leader"
        )
        if not collaborator:
            raise HTTPException(status_code=404, detail="Dados do colaborador não encontrados.")
        return collaborator

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to load collaborator data for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor.")


@router.get("/collaborator-history")
def get_collaborator_history(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """The collaborator's time entries, newest first."""
    try:
        entries = store.list_time_entries(session.user_id)
        return {"timeEntries": entries}
    except Exception as e:
        logger.error(f"Failed to load time entry history for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar histórico de horas.")


@router.post("/collaborator/set-access-code")
def set_access_code(
    body: SetAccessCodeRequest,
    request: Request,
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """
    Register the collaborator's access code on first login.

    Only allowed while no code is registered; afterwards codes change
    through an administrator. Clears the pending_access_code flag.
    """
    if not body.access_code or not body.confirm_access_code:
        raise HTTPException(status_code=400, detail="Informe e confirme o código de acesso.")
    if body.access_code != body.confirm_access_code:
        raise HTTPException(status_code=400, detail="Os códigos informados não conferem.")

    access_code = body.access_code.strip()
    if len(access_code) < MIN_ACCESS_CODE_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"O código de acesso deve ter pelo menos {MIN_ACCESS_CODE_LENGTH} caracteres."
        )

    try:
        current = store.get_collaborator(session.user_id, "id, access_code")
        if not current:
            raise HTTPException(status_code=404, detail="Colaborador não encontrado.")
        if current.get("access_code"):
            raise HTTPException(status_code=409, detail="Você já possui um código de acesso cadastrado.")

        if store.find_collaborator_by_access_code(access_code, exclude_id=session.user_id):
            raise HTTPException(status_code=409, detail="Este código de acesso já está em uso por outro colaborador.")

        store.update_collaborator(session.user_id, {"access_code": access_code})
        set_session(request, session.user_id, "collaborator")

        logger.info(f"Collaborator {session.user_id} registered an access code")
        return {"message": "Código de acesso cadastrado com sucesso."}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=409, detail="Este código de acesso já está em uso por outro colaborador.")
    except Exception as e:
        logger.error(f"Failed to register access code for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor.")


@router.post("/collaborator/leave-request")
def create_leave_request(
    body: LeaveRequestCreate,
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """
    File a leave request.

    Collaborators with a negative balance cannot request leave.
    """
    if not body.start_date or not body.end_date or not body.reason:
        raise HTTPException(status_code=400, detail="Data de início, data de término e motivo são obrigatórios.")
    if body.start_date > body.end_date:
        raise HTTPException(status_code=400, detail="A data de início deve ser anterior ou igual à data de término.")

    try:
        collaborator = store.get_collaborator(session.user_id, "balance_hours")
        if not collaborator:
            raise HTTPException(
                status_code=404,
                detail="Colaborador não encontrado ou erro ao buscar saldo de horas."
            )

        if float(collaborator.get("balance_hours") or 0) < 0:
            raise HTTPException(
                status_code=403,
                detail="Seu saldo de horas é negativo. Não é possível solicitar folga."
            )

        leave_request = store.create_leave_request({
            "collaborator_id": session.user_id,
            "start_date": body.start_date.isoformat(),
            "end_date": body.end_date.isoformat(),
            "reason": body.reason,
        })
        return {"message": "Solicitação de folga enviada com sucesso.", "request": leave_request}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create leave request for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao enviar solicitação de folga.")


@router.get("/collaborator/leave-requests")
def list_own_leave_requests(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    try:
        return {"leaveRequests": store.list_leave_requests(collaborator_id=session.user_id)}
    except Exception as e:
        logger.error(f"Failed to list leave requests for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar suas solicitações de folga.")


@router.post("/collaborator/access-code-reset-request")
def request_access_code_reset(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """Ask administrators for a new access code (one pending request at a time)."""
    try:
        if store.get_pending_reset_request(session.user_id):
            raise HTTPException(
                status_code=409,
                detail="Você já tem uma solicitação de redefinição de código de acesso pendente."
            )

        reset_request = store.create_reset_request(session.user_id)
        return {
            "message": "Solicitação de redefinição de código de acesso enviada com sucesso.",
            "request": reset_request,
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create access code reset request for {session.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao enviar solicitação de redefinição de código de acesso.")


@router.get("/collaborator/announcement")
def get_announcement(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    try:
        announcement = store.get_latest_announcement() or {}
        return {
            "content": announcement.get("content") or "",
            "created_at": announcement.get("created_at"),
        }
    except Exception as e:
        logger.error(f"Failed to load announcement for collaborator: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar aviso.")


@router.get("/collaborator/time-bank-period")
def get_time_bank_period(
    session: SessionData = Depends(require_collaborator),
    store: SupabaseClient = Depends(get_store),
):
    """
    The active time bank period with a countdown to its end.

    Returns only a message when no period is active.
    """
    try:
        period = store.get_active_period()
        if not period:
            return {"message": "Nenhum período de banco de horas ativo encontrado."}

        remaining = time_remaining(period["end_date"])
        return dict(period, time_remaining=remaining.to_dict())

    except Exception as e:
        logger.error(f"Failed to load time bank period: {e}")
        raise HTTPException(status_code=500, detail="Erro ao buscar período do banco de horas.")
