"""
FastAPI application for the Time Bank Portal.

REST API used by the portal frontend: administrator and collaborator
logins, hour balances, requests, announcements and notifications, all
stored in Supabase.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from backend.error_handlers import register_error_handlers
from backend.routes import ROUTERS
from backend.session import SESSION_COOKIE
from models.config_models import Config
from utils.config_loader import load_config
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Validated configuration (loaded from .env when omitted)

    Returns:
        FastAPI: App with sessions, CORS, error handlers and all routers.
                 The Supabase store is created on first use (see
                 backend.dependencies.get_store).
    """
    if config is None:
        config = load_config()

    setup_logger(config.log_level)

    app = FastAPI(
        title="Time Bank Portal API",
        description="REST API for the time bank (banco de horas) portal",
        version="1.0.0"
    )
    app.state.config = config

    # Signed cookie holding the session JSON
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.credentials.session_secret,
        session_cookie=SESSION_COOKIE,
        max_age=config.session_max_age_seconds,
        same_site="lax",
        https_only=config.cookie_secure,
    )

    # The frontend sends the session cookie cross-origin during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    logger.info("FastAPI app initialized")
    return app
