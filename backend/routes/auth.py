"""
Authentication routes.

Administrators log in with username + password (bcrypt). Collaborators log
in with their badge number + personal access code; a collaborator without
an access code gets a session flagged pending_access_code and is sent to
register one.
"""

import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from backend.dependencies import get_store
from backend.session import clear_pending_access_code, delete_session, get_session, set_session
from models.data_models import AdminLoginRequest, CollaboratorLoginRequest, ForgotAccessCodeRequest
from storage.supabase_client import SupabaseClient
from utils.passwords import verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_ADMIN_CREDENTIALS = "Usuário ou senha inválidos."


@router.post("/admin-login")
def admin_login(body: AdminLoginRequest, request: Request, store: SupabaseClient = Depends(get_store)):
    """
    Log an administrator in.

    Unknown usernames and wrong passwords get the same 401 answer.
    """
    try:
        if not body.username or not body.password:
            raise HTTPException(status_code=401, detail=INVALID_ADMIN_CREDENTIALS)

        admin = store.get_administrator_by_username(body.username)
        if not admin or not verify_password(body.password, admin.get("password_hash") or ""):
            logger.warning(f"Failed admin login for username '{body.username}'")
            raise HTTPException(status_code=401, detail=INVALID_ADMIN_CREDENTIALS)

        set_session(request, admin["id"], "admin")
        logger.info(f"Admin '{body.username}' logged in")
        return {"message": "Login bem-sucedido."}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Admin login failed: {e}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor.")


@router.post("/collaborator-login")
def collaborator_login(body: CollaboratorLoginRequest, request: Request, store: SupabaseClient = Depends(get_store)):
    """
    Log a collaborator in with badge number and access code.

    Outcomes:
    - no access code registered yet and none sent: pending session,
      {"needsAccessCodeSetup": true}
    - no access code registered yet but one sent: 400
    - access code registered but none sent: 200 {"accessCodeRequired": true}
      so the form can ask for it
    - wrong code: 401; right code: full session
    """
    if not body.badge_number:
        raise HTTPException(status_code=400, detail="Número do crachá é obrigatório.")

    try:
        collaborator = store.get_collaborator_by_badge(body.badge_number)
    except Exception as e:
        logger.error(f"Collaborator login lookup failed for badge {body.badge_number}: {e}")
        raise HTTPException(status_code=500, detail="Erro ao verificar o crachá. Tente novamente.")

    if not collaborator or not collaborator.get("is_active", True):
        raise HTTPException(status_code=401, detail="Número do crachá inválido ou colaborador inativo.")

    stored_code = collaborator.get("access_code")

    if not stored_code:
        if body.access_code:
            raise HTTPException(
                status_code=400,
                detail=(
                    "Você não possui um código de acesso cadastrado. Por favor, deixe o campo de "
                    "código de acesso vazio para cadastrar um novo."
                ),
            )
        set_session(request, collaborator["id"], "collaborator", pending_access_code=True)
        logger.info(f"Collaborator {body.badge_number} must register an access code")
        return {
            "message": "Cadastro de código de acesso necessário.",
            "needsAccessCodeSetup": True,
        }

    if not body.access_code:
        return {"error": "Código de acesso é obrigatório.", "accessCodeRequired": True}

    if not hmac.compare_digest(body.access_code.strip().encode("utf-8"), str(stored_code).strip().encode("utf-8")):
        logger.warning(f"Wrong access code for badge {body.badge_number}")
        raise HTTPException(status_code=401, detail="Código de acesso inválido.")

    set_session(request, collaborator["id"], "collaborator")
    logger.info(f"Collaborator {body.badge_number} logged in")
    return {"message": "Login de colaborador bem-sucedido."}


@router.post("/forgot-access-code")
def forgot_access_code(body: ForgotAccessCodeRequest, store: SupabaseClient = Depends(get_store)):
    """
    Acknowledge a forgotten access code.

    The code itself is never returned nor logged; collaborators recover
    access through an administrator (reset request or direct change).
    """
    if not body.badge_number:
        raise HTTPException(status_code=400, detail="Número do crachá é obrigatório.")

    try:
        collaborator = store.get_collaborator_by_badge(body.badge_number)
        if not collaborator:
            raise HTTPException(status_code=404, detail="Número do crachá não encontrado.")

        logger.info(f"Access code reminder requested for badge {body.badge_number}")
        return {"message": "Se o número do crachá estiver correto, seu código de acesso foi enviado."}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Forgot access code failed for badge {body.badge_number}: {e}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor.")


@router.get("/get-session")
def read_session(request: Request):
    session = get_session(request)
    if session is None:
        raise HTTPException(status_code=401, detail="Nenhuma sessão ativa.")
    return {"session": session.model_dump()}


@router.post("/logout")
def logout(request: Request):
    delete_session(request)
    return {"message": "Logout bem-sucedido."}


@router.post("/clear-pending-access-code")
def clear_pending(request: Request):
    if clear_pending_access_code(request):
        return {"message": "Sessão atualizada."}
    return {"message": "Nenhuma sessão pendente para limpar."}
