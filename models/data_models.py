"""Request bodies and session payload for the time bank API.

Field names follow the JSON the portal frontend already sends: most bodies
use snake_case column names, while the login and access-code flows use
camelCase keys (``badgeNumber``, ``accessCode``...). Aliased models accept
both spellings.

Required fields are declared Optional: the route
handlers check presence themselves so the caller gets the portal's own
Portuguese message instead of a generic validation error.
"""

import datetime as dt
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

EntryType = Literal["positive", "negative", "overtime"]
RequestStatus = Literal["pending", "approved", "rejected"]
UserType = Literal["admin", "collaborator"]

DECISION_STATUSES = ("approved", "rejected")

ADMIN_PERMISSIONS = (
    "can_create_collaborator",
    "can_create_admin",
    "can_enter_hours",
    "can_change_access_code",
)


class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SessionData(BaseModel):
    """Payload stored in the signed session cookie."""
    user_id: str
    user_type: UserType
    role: UserType
    pending_access_code: bool = False


# ============================================================================
# Authentication
# ============================================================================

class AdminLoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class CollaboratorLoginRequest(_AliasedModel):
    badge_number: Optional[str] = Field(None, alias="badgeNumber")
    access_code: Optional[str] = Field(None, alias="accessCode")


class ForgotAccessCodeRequest(_AliasedModel):
    badge_number: Optional[str] = Field(None, alias="badgeNumber")


class SetAccessCodeRequest(_AliasedModel):
    access_code: Optional[str] = Field(None, alias="accessCode")
    confirm_access_code: Optional[str] = Field(None, alias="confirmAccessCode")


# ============================================================================
# People management
# ============================================================================

class CollaboratorPayload(BaseModel):
    """Body for creating or updating a collaborator."""
    full_name: Optional[str] = None
    badge_number: Optional[str] = None
    access_code: Optional[str] = None
    direct_leader: Optional[str] = None


class AdministratorPayload(BaseModel):
    """Body for creating or updating an administrator.

    Permission flags left out on creation default to False. On update a
    missing password keeps the current hash.
    """
    full_name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    can_create_collaborator: Optional[bool] = None
    can_create_admin: Optional[bool] = None
    can_enter_hours: Optional[bool] = None
    can_change_access_code: Optional[bool] = None


class ChangeAccessCodeRequest(_AliasedModel):
    collaborator_id: Optional[str] = Field(None, alias="collaboratorId")
    new_access_code: Optional[str] = Field(None, alias="newAccessCode")


# ============================================================================
# Hours and periods
# ============================================================================

class TimeEntryCreate(BaseModel):
    """Hours posted by an administrator against a collaborator's balance."""
    collaborator_id: Optional[str] = None
    date: Optional[dt.date] = None
    hours_worked: Optional[float] = Field(None, gt=0)
    entry_type: Optional[str] = None
    description: Optional[str] = None


class PeriodCreate(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


# ============================================================================
# Content
# ============================================================================

class AnnouncementCreate(BaseModel):
    content: Optional[str] = None


class BannerCreate(BaseModel):
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


class BannerUpdate(BaseModel):
    """Partial banner update; only the fields sent are written."""
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


# ============================================================================
# Requests and notifications
# ============================================================================

class LeaveRequestCreate(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    reason: Optional[str] = None


class StatusDecision(BaseModel):
    status: Optional[str] = None


class ResetDecision(_AliasedModel):
    status: Optional[str] = None
    new_access_code: Optional[str] = Field(None, alias="newAccessCode")
    notes: Optional[str] = None


class SendTestNotificationRequest(_AliasedModel):
    recipient_id: Optional[str] = Field(None, alias="recipientId")
    recipient_type: Optional[str] = Field(None, alias="recipientType")
    message: Optional[str] = None


class MarkReadRequest(_AliasedModel):
    notification_ids: Optional[List[str]] = Field(None, alias="notificationIds")
