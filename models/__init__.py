"""Data models for the time bank portal."""

from models.config_models import Config, CredentialsConfig
from models.data_models import EntryType, RequestStatus, SessionData, UserType

__all__ = [
    "Config",
    "CredentialsConfig",
    "EntryType",
    "RequestStatus",
    "SessionData",
    "UserType",
]
