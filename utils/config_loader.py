"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import Config, CredentialsConfig


def _split_origins(raw: Optional[str]) -> Optional[List[str]]:
    """Turn a comma separated CORS_ORIGINS value into a list (None if unset)."""
    if not raw:
        return None
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _parse_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Reads from .env file in the project root and validates all required
    credentials and settings using Pydantic models.

    Returns:
        Config: Validated configuration object

    Raises:
        SystemExit: If configuration is invalid or missing required fields
    """
    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    try:
        settings = {
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "cookie_secure": _parse_bool(os.getenv("COOKIE_SECURE")),
            "session_max_age_days": os.getenv("SESSION_MAX_AGE_DAYS", "7"),
        }
        origins = _split_origins(os.getenv("CORS_ORIGINS"))
        if origins:
            settings["cors_origins"] = origins

        config = Config(
            credentials=CredentialsConfig(
                supabase_url=os.getenv("SUPABASE_URL", ""),
                supabase_key=os.getenv("SUPABASE_KEY", ""),
                database_url=os.getenv("DATABASE_URL"),
                session_secret=os.getenv("SESSION_SECRET", ""),
            ),
            **settings,
        )

        return config

    except ValidationError as e:
        print("❌ Configuration validation failed:", file=sys.stderr)
        print("\nPlease check your .env file. Missing or invalid fields:", file=sys.stderr)

        for error in e.errors():
            field_path = " → ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  • {field_path}: {message}", file=sys.stderr)

        print("\nHint: Copy .env.example to .env and fill in your credentials.", file=sys.stderr)
        sys.exit(1)
