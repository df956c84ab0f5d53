"""
Admin routes for people management: collaborators, administrators and
collaborator access codes.

Listing needs only an admin session; writes need the matching permission
flag (can_create_collaborator, can_create_admin, can_change_access_code).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.dependencies import get_store, require_admin, require_permission
from models.data_models import (
    ADMIN_PERMISSIONS,
    AdministratorPayload,
    ChangeAccessCodeRequest,
    CollaboratorPayload,
    SessionData,
)
from storage.supabase_client import DuplicateRecordError, SupabaseClient
from utils.passwords import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-staff"])

DUPLICATE_COLLABORATOR = "Número do crachá ou código de acesso já existe."
ACCESS_CODE_IN_USE = "Este código de acesso já está em uso por outro colaborador."


# ============================================================================
# Collaborators
# ============================================================================

@router.get("/collaborators")
def list_collaborators(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    try:
        return store.list_collaborators()
    except Exception as e:
        logger.error(f"Failed to list collaborators: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar colaboradores.")


@router.post("/collaborators")
def create_collaborator(
    body: CollaboratorPayload,
    session: SessionData = Depends(require_permission(
        "can_create_collaborator", "Você não tem permissão para criar colaboradores."
    )),
    store: SupabaseClient = Depends(get_store),
):
    if not body.full_name or not body.badge_number or not body.access_code:
        raise HTTPException(
            status_code=400,
            detail="Nome completo, número do crachá e código de acesso são obrigatórios."
        )

    try:
        collaborator = store.create_collaborator({
            "full_name": body.full_name,
            "badge_number": body.badge_number,
            "access_code": body.access_code,
            "direct_leader": body.direct_leader or None,
        })
        return {"message": "Colaborador criado com sucesso.", "collaborator": collaborator}

    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail=DUPLICATE_COLLABORATOR)
    except Exception as e:
        logger.error(f"Failed to create collaborator: {e}")
        raise HTTPException(status_code=500, detail="Falha ao criar colaborador.")


@router.put("/collaborators/{collaborator_id}")
def update_collaborator(
    collaborator_id: str,
    body: CollaboratorPayload,
    session: SessionData = Depends(require_permission(
        "can_create_collaborator", "Você não tem permissão para atualizar colaboradores."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """
    Update a collaborator's name, badge, access code and leader.

    Fields left out of the body are not changed; an empty direct_leader
    clears the leader.
    """
    updates = body.model_dump(exclude_unset=True)
    if "direct_leader" in updates:
        updates["direct_leader"] = updates["direct_leader"] or None
    if not updates:
        raise HTTPException(status_code=400, detail="Nenhum dado para atualizar.")

    try:
        updated = store.update_collaborator(collaborator_id, updates)
        if not updated:
            raise HTTPException(status_code=404, detail="Colaborador não encontrado.")
        return {"message": "Colaborador atualizado com sucesso."}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail=DUPLICATE_COLLABORATOR)
    except Exception as e:
        logger.error(f"Failed to update collaborator {collaborator_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao atualizar colaborador.")


@router.delete("/collaborators/{collaborator_id}")
def delete_collaborator(
    collaborator_id: str,
    session: SessionData = Depends(require_permission(
        "can_create_collaborator", "Você não tem permissão para excluir colaboradores."
    )),
    store: SupabaseClient = Depends(get_store),
):
    try:
        store.delete_collaborator(collaborator_id)
        logger.info(f"Admin {session.user_id} deleted collaborator {collaborator_id}")
        return {"message": "Colaborador excluído com sucesso."}
    except Exception as e:
        logger.error(f"Failed to delete collaborator {collaborator_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao excluir colaborador.")


@router.post("/change-access-code")
def change_access_code(
    body: ChangeAccessCodeRequest,
    session: SessionData = Depends(require_permission(
        "can_change_access_code", "Você não tem permissão para alterar códigos de acesso."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """Set a collaborator's access code (must not belong to anyone else)."""
    if not body.collaborator_id or not body.new_access_code:
        raise HTTPException(
            status_code=400,
            detail="ID do colaborador e novo código de acesso são obrigatórios."
        )

    try:
        if store.find_collaborator_by_access_code(body.new_access_code, exclude_id=body.collaborator_id):
            raise HTTPException(status_code=409, detail=ACCESS_CODE_IN_USE)

        updated = store.update_collaborator(body.collaborator_id, {"access_code": body.new_access_code})
        if not updated:
            raise HTTPException(status_code=404, detail="Colaborador não encontrado.")

        logger.info(f"Admin {session.user_id} changed the access code of collaborator {body.collaborator_id}")
        return {"message": "Código de acesso alterado com sucesso."}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=409, detail=ACCESS_CODE_IN_USE)
    except Exception as e:
        logger.error(f"Failed to change access code of {body.collaborator_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao alterar o código de acesso.")


# ============================================================================
# Administrators
# ============================================================================

@router.get("/administrators")
def list_administrators(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    try:
        administrators = store.list_administrators()
        logger.debug(f"Listed {len(administrators)} administrators")
        return administrators
    except Exception as e:
        logger.error(f"Failed to list administrators: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar administradores.")


@router.get("/get-admin-data")
def get_admin_data(
    admin_id: Optional[str] = Query(None, alias="id", description="Administrator ID"),
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    if not admin_id:
        raise HTTPException(status_code=400, detail="ID do administrador é obrigatório.")

    try:
        admin = store.get_administrator(admin_id)
        if not admin:
            raise HTTPException(status_code=404, detail="Administrador não encontrado.")
        return admin

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to load administrator {admin_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro interno do servidor.")


@router.post("/create-admin")
def create_admin(
    body: AdministratorPayload,
    session: SessionData = Depends(require_permission(
        "can_create_admin", "Você não tem permissão para criar administradores."
    )),
    store: SupabaseClient = Depends(get_store),
):
    if not body.full_name or not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Nome completo, usuário e senha são obrigatórios.")

    record = {
        "full_name": body.full_name,
        "username": body.username,
        "password_hash": hash_password(body.password),
    }
    for permission in ADMIN_PERMISSIONS:
        record[permission] = bool(getattr(body, permission))

    try:
        admin = store.create_administrator(record)
        return {"message": "Administrador criado com sucesso.", "admin": admin}

    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail="Nome de usuário já existe.")
    except Exception as e:
        logger.error(f"Failed to create administrator '{body.username}': {e}")
        raise HTTPException(status_code=500, detail="Falha ao criar administrador.")


@router.put("/update-admin/{admin_id}")
def update_admin(
    admin_id: str,
    body: AdministratorPayload,
    session: SessionData = Depends(require_permission(
        "can_create_admin", "Você não tem permissão para atualizar administradores."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """
    Update an administrator's profile and permissions.

    The password is only rehashed when a new one is sent.
    """
    updates = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})
    if body.password:
        updates["password_hash"] = hash_password(body.password)
    if not updates:
        raise HTTPException(status_code=400, detail="Nenhum dado para atualizar.")

    try:
        updated = store.update_administrator(admin_id, updates)
        if not updated:
            raise HTTPException(status_code=404, detail="Administrador não encontrado.")
        return {"message": "Administrador atualizado com sucesso."}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail="Nome de usuário já existe.")
    except Exception as e:
        logger.error(f"Failed to update administrator {admin_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao atualizar administrador.")


@router.delete("/delete-admin/{admin_id}")
def delete_admin(
    admin_id: str,
    session: SessionData = Depends(require_permission(
        "can_create_admin", "Você não tem permissão para excluir administradores."
    )),
    store: SupabaseClient = Depends(get_store),
):
    if admin_id == session.user_id:
        raise HTTPException(status_code=400, detail="Você não pode excluir sua própria conta de administrador.")

    try:
        store.delete_administrator(admin_id)
        logger.info(f"Admin {session.user_id} deleted administrator {admin_id}")
        return {"message": "Administrador excluído com sucesso."}
    except Exception as e:
        logger.error(f"Failed to delete administrator {admin_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao excluir administrador.")
