"""
Portal content: the collaborators' announcement and the info banners shown
on the login page.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_store, require_admin, require_permission
from models.data_models import AnnouncementCreate, BannerCreate, BannerUpdate, SessionData
from storage.supabase_client import DuplicateRecordError, SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["content"])

MAX_BANNERS = 5
DUPLICATE_BANNER_ORDER = "Já existe um banner com esta ordem de exibição."
BANNER_ORDER_RANGE = f"A ordem de exibição deve estar entre 1 e {MAX_BANNERS}."
BANNER_PERMISSION = "Você não tem permissão para gerenciar banners."


def _valid_order(order_index: int) -> bool:
    return 1 <= order_index <= MAX_BANNERS


# ============================================================================
# Announcement
# ============================================================================

@router.get("/admin/announcement")
def get_announcement(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    try:
        announcement = store.get_latest_announcement() or {}
        return {"content": announcement.get("content") or ""}
    except Exception as e:
        logger.error(f"Failed to load announcement: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar aviso.")


@router.post("/admin/announcement")
def save_announcement(
    body: AnnouncementCreate,
    session: SessionData = Depends(require_permission(
        "can_enter_hours", "Você não tem permissão para gerenciar avisos."
    )),
    store: SupabaseClient = Depends(get_store),
):
    """Publish a new announcement; earlier ones are removed."""
    content = (body.content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="O conteúdo do aviso é obrigatório.")

    try:
        announcement = store.replace_announcement(content, session.user_id)
        logger.info(f"Admin {session.user_id} published a new announcement")
        return {"message": "Aviso salvo com sucesso.", "announcement": announcement}
    except Exception as e:
        logger.error(f"Failed to save announcement: {e}")
        raise HTTPException(status_code=500, detail="Falha ao salvar aviso.")


# ============================================================================
# Info banners
# ============================================================================

@router.get("/info-banners")
def list_public_banners(store: SupabaseClient = Depends(get_store)):
    """
    Active banners for the login page, as {"banners": [...]}.

    No session needed. Errors are logged and answered with an empty list so
    the login page still renders.
    """
    try:
        return {"banners": store.list_active_banners() or []}
    except Exception as e:
        logger.error(f"Failed to load public info banners: {e}")
        return {"banners": []}


@router.get("/admin/info-banners")
def list_banners(
    session: SessionData = Depends(require_admin),
    store: SupabaseClient = Depends(get_store),
):
    try:
        return {"banners": store.list_banners()}
    except Exception as e:
        logger.error(f"Failed to list info banners: {e}")
        raise HTTPException(status_code=500, detail="Falha ao carregar banners.")


@router.post("/admin/info-banners")
def create_banner(
    body: BannerCreate,
    session: SessionData = Depends(require_permission("can_enter_hours", BANNER_PERMISSION)),
    store: SupabaseClient = Depends(get_store),
):
    """
    Add a banner.

    Request Body:
    - image_url: required
    - link_url: optional
    - order_index: required, 1..5 and unique
    - is_active: defaults to True

    At most five banners exist at any time.
    """
    if not body.image_url or body.order_index is None:
        raise HTTPException(status_code=400, detail="URL da imagem e ordem de exibição são obrigatórios.")
    if not _valid_order(body.order_index):
        raise HTTPException(status_code=400, detail=BANNER_ORDER_RANGE)

    try:
        if store.count_banners() >= MAX_BANNERS:
            raise HTTPException(status_code=400, detail=f"Limite de {MAX_BANNERS} banners atingido.")

        banner = store.create_banner({
            "image_url": body.image_url,
            "link_url": body.link_url or None,
            "order_index": body.order_index,
            "is_active": True if body.is_active is None else body.is_active,
            "admin_id": session.user_id,
        })
        return {"message": "Banner adicionado com sucesso.", "banner": banner}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail=DUPLICATE_BANNER_ORDER)
    except Exception as e:
        logger.error(f"Failed to create info banner: {e}")
        raise HTTPException(status_code=500, detail="Falha ao adicionar banner.")


@router.put("/admin/info-banners/{banner_id}")
def update_banner(
    banner_id: str,
    body: BannerUpdate,
    session: SessionData = Depends(require_permission("can_enter_hours", BANNER_PERMISSION)),
    store: SupabaseClient = Depends(get_store),
):
    updates = body.model_dump(exclude_unset=True)
    if "order_index" in updates and (updates["order_index"] is None or not _valid_order(updates["order_index"])):
        raise HTTPException(status_code=400, detail=BANNER_ORDER_RANGE)
    if "image_url" in updates and not updates["image_url"]:
        raise HTTPException(status_code=400, detail="URL da imagem é obrigatória.")
    if "link_url" in updates:
        updates["link_url"] = updates["link_url"] or None
    if "is_active" in updates and updates["is_active"] is None:
        del updates["is_active"]
    if not updates:
        raise HTTPException(status_code=400, detail="Nenhum dado para atualizar.")

    try:
        banner = store.update_banner(banner_id, updates)
        if not banner:
            raise HTTPException(status_code=404, detail="Banner não encontrado.")
        return {"message": "Banner atualizado com sucesso.", "banner": banner}

    except HTTPException:
        raise
    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail=DUPLICATE_BANNER_ORDER)
    except Exception as e:
        logger.error(f"Failed to update info banner {banner_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao atualizar banner.")


@router.delete("/admin/info-banners/{banner_id}")
def delete_banner(
    banner_id: str,
    session: SessionData = Depends(require_permission("can_enter_hours", BANNER_PERMISSION)),
    store: SupabaseClient = Depends(get_store),
):
    try:
        store.delete_banner(banner_id)
        logger.info(f"Admin {session.user_id} deleted info banner {banner_id}")
        return {"message": "Banner excluído com sucesso."}
    except Exception as e:
        logger.error(f"Failed to delete info banner {banner_id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao excluir banner.")
