"""Configuration models for validation using Pydantic."""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class CredentialsConfig(BaseModel):
    """Secrets loaded from environment variables."""

    # Supabase (required)
    supabase_url: str = Field(..., min_length=1, description="Supabase project URL")
    supabase_key: str = Field(..., min_length=1, description="Supabase service role key")
    database_url: Optional[str] = Field(None, description="PostgreSQL database URL (optional, for schema setup)")

    # Cookie signing
    session_secret: str = Field(..., min_length=1, description="Secret used to sign the session cookie")

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Validate Supabase URL format."""
        if not v or v == "https://your-project.supabase.co":
            raise ValueError("Supabase URL must be set in .env file")
        if not v.startswith("https://"):
            raise ValueError("Supabase URL must start with https://")
        return v

    @field_validator("supabase_key")
    @classmethod
    def validate_supabase_key(cls, v: str) -> str:
        """Validate Supabase key is set."""
        if not v or v == "your_supabase_service_role_key_here":
            raise ValueError("Supabase key must be set in .env file")
        return v

    @field_validator("session_secret")
    @classmethod
    def validate_session_secret(cls, v: str) -> str:
        """Validate the session secret is set and long enough to sign cookies."""
        if not v or v == "change_me_session_secret":
            raise ValueError("Session secret must be set in .env file")
        if len(v) < 16:
            raise ValueError("Session secret must be at least 16 characters long")
        return v


class Config(BaseModel):
    """Application configuration."""

    credentials: CredentialsConfig
    log_level: str = Field(default="INFO", description="Logging level")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Frontend origins allowed to call the API with credentials"
    )
    cookie_secure: bool = Field(default=False, description="Send the session cookie over HTTPS only")
    session_max_age_days: int = Field(default=7, ge=1, description="Session cookie lifetime in days")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_max_age_days * 24 * 60 * 60
