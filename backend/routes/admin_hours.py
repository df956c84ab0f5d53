"""
Admin routes for the hours themselves: posting time entries, the time
bank period, the dashboard summary and per-leader reports.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_store, require_admin, require_permission
from models.data_models import PeriodCreate, SessionData, TimeEntryCreate
from storage.supabase_client import SupabaseClient
from timebank.ledger import apply_entry, summarize_balances

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-hours"])


@router.post("/time-entry")
def create_time_entry(
    body: TimeEntryCreate,
    session: SessionData = Depends(require_permission(
        "can_enter_hours", "Você não tem permissão para lançar horas."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """
    Post hours for a collaborator and update the balance.

    Request Body:
    - collaborator_id, date, hours_worked (> 0)
    - entry_type: 'positive' (credit), 'negative' (debit), 'overtime'
      (credit, also kept as overtime_hours)
    - description (optional)

    The entry is stored with its signed balance change, then the
    collaborator's balance_hours is set to the new total.
    """
    if not body.collaborator_id or not body.date or body.hours_worked is None or not body.entry_type:
        raise HTTPException(status_code=400, detail="Dados incompletos para o lançamento de horas.")

    try:
        collaborator = store.get_collaborator(body.collaborator_id, "id, balance_hours")
        if not collaborator:
            raise HTTPException(status_code=404, detail="Colaborador não encontrado ou erro ao buscar saldo.")

        try:
            effect = apply_entry(collaborator.get("balance_hours"), body.entry_type, body.hours_worked)
        except ValueError:
            raise HTTPException(status_code=400, detail="Tipo de lançamento inválido.")

        store.insert_time_entry({
            "collaborator_id": body.collaborator_id,
            "date": body.date.isoformat(),
            "hours_worked": body.hours_worked,
            "overtime_hours": effect.overtime_hours,
            "balance_hours": effect.balance_change,
            "entry_type": body.entry_type,
            "description": body.description,
        })
        store.set_balance(body.collaborator_id, effect.new_balance)

        logger.info(
            f"Admin {session.user_id} posted {body.entry_type} {body.hours_worked}h for "
            f"collaborator {body.collaborator_id} (balance → {effect.new_balance})"
        )
        return {
            "message": "Lançamento de horas registrado e saldo atualizado com sucesso.",
            "balance_hours": effect.new_balance,
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to post hours for collaborator {body.collaborator_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao registrar lançamento de horas.")


@router.get("/time-bank-period")
def get_time_bank_period(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    """The active period, or null when none is active."""
    try:
        return store.get_active_period()
    except Exception as e:
        logger.error(f"Failed to load time bank period: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar período do banco de horas.")


@router.post("/time-bank-period")
def set_time_bank_period(
    body: PeriodCreate,
    session: SessionData = Depends(require_permission(
        "can_enter_hours", "Você não tem permissão para gerenciar o período do banco de horas."
    )),
    store: SupabaseClient = Depends(get_store),
):
    if not body.start_date or not body.end_date:
        raise HTTPException(status_code=400, detail="Data de início e data de término são obrigatórias.")
    if body.start_date >= body.end_date:
        raise HTTPException(status_code=400, detail="A data de início deve ser anterior à data de término.")

    try:
        period = store.start_period(body.start_date.isoformat(), body.end_date.isoformat(), session.user_id)
        return {"message": "Período do banco de horas definido com sucesso.", "period": period}
    except Exception as e:
        logger.error(f"Failed to set time bank period: {e}")
        raise HTTPException(status_code=500, detail="Falha ao criar período do banco de horas.")


@router.get("/dashboard-summary")
def get_dashboard_summary(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    """
    Totals for the admin dashboard.

    Returns:
    - totalPositiveHours / totalNegativeHours across all collaborators
    - positiveCollaborators: top 5 balances above zero
    - negativeCollaborators: top 5 most negative balances
    """
    try:
        totals = store.get_balance_totals()
        positive = store.get_top_balances(positive=True)
        negative = store.get_top_balances(positive=False)

        return {
            "totalPositiveHours": totals["total_positive_hours"],
            "totalNegativeHours": totals["total_negative_hours"],
            "positiveCollaborators": positive,
            "negativeCollaborators": negative,
        }
    except Exception as e:
        logger.error(f"Failed to build dashboard summary: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar resumo de horas.")


@router.get("/reports/leader/{leader_name}")
def get_leader_report(
    leader_name: str,
    session: SessionData = Depends(require_permission(
        "can_enter_hours", "Você não tem permissão para gerar relatórios."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """Balances of every collaborator reporting to a direct leader."""
    try:
        collaborators = store.list_collaborators_by_leader(leader_name)
        totals = summarize_balances(collaborators)

        logger.info(f"Generated leader report for '{leader_name}' ({len(collaborators)} collaborators)")
        return {
            "leaderName": leader_name,
            "collaborators": collaborators,
            "totalPositiveHours": totals["total_positive_hours"],
            "totalNegativeHours": totals["total_negative_hours"],
        }
    except Exception as e:
        logger.error(f"Failed to generate leader report for '{leader_name}': {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar dados dos colaboradores.")
