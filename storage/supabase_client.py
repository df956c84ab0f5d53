"""
Supabase storage client for the time bank portal.

Every table the portal touches is read and written through this class:
administrators, collaborators, time entries, time bank periods,
announcements, info banners, leave requests, access code reset requests
and notifications.

Single-row lookups return None when nothing matches. Writes return the
affected record(s) as dicts. Failures are logged and re-raised; unique
constraint violations are re-raised as DuplicateRecordError so callers can
answer with a friendly message.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from supabase import Client, create_client


logger = logging.getLogger(__name__)

ADMIN_PUBLIC_COLUMNS = (
    "id, full_name, username, can_create_collaborator, can_create_admin, "
    "can_enter_hours, can_change_access_code"
)

NOTIFICATION_LIMIT = 10
TOP_BALANCES_LIMIT = 5


class DuplicateRecordError(Exception):
    """Raised when a write violates a unique constraint."""


def _is_duplicate_key_error(error: Exception) -> bool:
    """Detect Postgres unique violations surfaced by PostgREST."""
    if getattr(error, "code", None) == "23505":
        return True
    message = getattr(error, "message", None) or str(error)
    return "duplicate key" in message


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _first(result) -> Optional[Dict[str, Any]]:
    return result.data[0] if result.data else None


class SupabaseClient:
    """Client for interacting with Supabase storage."""

    def __init__(self, supabase_url: str, supabase_key: str):
        """
        Initialize Supabase client.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase service role key (server side only)
        """
        self.client: Client = create_client(supabase_url, supabase_key)
        logger.info(f"Initialized SupabaseClient for {supabase_url}")

    def _get_one(self, table: str, column: str, value: Any, columns: str = "*") -> Optional[Dict[str, Any]]:
        result = self.client.table(table).select(columns).eq(column, value).limit(1).execute()
        return _first(result)

    def _insert(self, table: str, record: Dict[str, Any], label: str) -> Dict[str, Any]:
        try:
            result = self.client.table(table).insert(record).execute()
            return _first(result) or record
        except Exception as e:
            if _is_duplicate_key_error(e):
                logger.warning(f"Duplicate {label} rejected by database: {e}")
                raise DuplicateRecordError(str(e)) from e
            logger.error(f"Failed to insert {label}: {e}")
            raise

    def _update(self, table: str, record_id: str, updates: Dict[str, Any], label: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.client.table(table).update(updates).eq("id", record_id).execute()
            return _first(result)
        except Exception as e:
            if _is_duplicate_key_error(e):
                logger.warning(f"Duplicate {label} rejected by database (id={record_id}): {e}")
                raise DuplicateRecordError(str(e)) from e
            logger.error(f"Failed to update {label} (id={record_id}): {e}")
            raise

    def _delete(self, table: str, record_id: str, label: str) -> None:
        try:
            self.client.table(table).delete().eq("id", record_id).execute()
            logger.debug(f"Deleted {label} (id={record_id})")
        except Exception as e:
            logger.error(f"Failed to delete {label} (id={record_id}): {e}")
            raise

    # ========================================================================
    # Administrators
    # ========================================================================

    def get_administrator(self, admin_id: str) -> Optional[Dict[str, Any]]:
        """
        Get an administrator (without password hash) by ID.

        Used on every admin request to check the permission flags, so a
        deleted administrator loses access immediately.
        """
        try:
            return self._get_one("administrators", "id", admin_id, ADMIN_PUBLIC_COLUMNS)
        except Exception as e:
            logger.error(f"Failed to get administrator {admin_id}: {e}")
            raise

    def get_administrator_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        """Get an administrator including its password hash, for login."""
        try:
            return self._get_one("administrators", "username", username, "id, username, password_hash")
        except Exception as e:
            logger.error(f"Failed to get administrator by username: {e}")
            raise

    def list_administrators(self) -> List[Dict[str, Any]]:
        """List administrators ordered by name (never returns hashes)."""
        try:
            result = self.client.table("administrators").select(
                ADMIN_PUBLIC_COLUMNS
            ).order("full_name").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list administrators: {e}")
            raise

    def create_administrator(self, record: Dict[str, Any]) -> Dict[str, Any]:
        created = self._insert("administrators", record, "administrator")
        logger.info(f"Created administrator '{record.get('username')}'")
        created.pop("password_hash", None)
        return created

    def update_administrator(self, admin_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updated = self._update("administrators", admin_id, updates, "administrator")
        if updated:
            updated.pop("password_hash", None)
        return updated

    def delete_administrator(self, admin_id: str) -> None:
        self._delete("administrators", admin_id, "administrator")

    # ========================================================================
    # Collaborators
    # ========================================================================

    def get_collaborator(self, collaborator_id: str, columns: str = "*") -> Optional[Dict[str, Any]]:
        try:
            return self._get_one("collaborators", "id", collaborator_id, columns)
        except Exception as e:
            logger.error(f"Failed to get collaborator {collaborator_id}: {e}")
            raise

    def get_collaborator_by_badge(self, badge_number: str) -> Optional[Dict[str, Any]]:
        """Get a collaborator by badge number, including its access code."""
        try:
            return self._get_one(
                "collaborators", "badge_number", badge_number,
                "id, full_name, badge_number, access_code, is_active"
            )
        except Exception as e:
            logger.error(f"Failed to get collaborator by badge {badge_number}: {e}")
            raise

    def list_collaborators(self) -> List[Dict[str, Any]]:
        try:
            result = self.client.table("collaborators").select(
                "id, full_name, badge_number, access_code, direct_leader, balance_hours"
            ).order("full_name").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list collaborators: {e}")
            raise

    def create_collaborator(self, record: Dict[str, Any]) -> Dict[str, Any]:
        created = self._insert("collaborators", record, "collaborator")
        logger.info(f"Created collaborator with badge {record.get('badge_number')}")
        return created

    def update_collaborator(self, collaborator_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updates = dict(updates, updated_at=_now_iso())
        return self._update("collaborators", collaborator_id, updates, "collaborator")

    def delete_collaborator(self, collaborator_id: str) -> None:
        self._delete("collaborators", collaborator_id, "collaborator")

    def find_collaborator_by_access_code(
        self,
        access_code: str,
        exclude_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find the collaborator holding an access code.

        Args:
            access_code: Code to look up
            exclude_id: Collaborator to ignore (the one being changed)

        Returns:
            Dict with the collaborator id, or None if the code is free
        """
        try:
            query = self.client.table("collaborators").select("id").eq("access_code", access_code)
            if exclude_id:
                query = query.neq("id", exclude_id)
            result = query.limit(1).execute()
            return _first(result)
        except Exception as e:
            logger.error(f"Failed to check access code availability: {e}")
            raise

    def list_collaborators_by_leader(self, leader_name: str) -> List[Dict[str, Any]]:
        try:
            result = self.client.table("collaborators").select(
                "id, full_name, badge_number, balance_hours"
            ).eq("direct_leader", leader_name).order("full_name").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list collaborators for leader {leader_name}: {e}")
            raise

    def get_top_balances(self, positive: bool = True, limit: int = TOP_BALANCES_LIMIT) -> List[Dict[str, Any]]:
        """
        Collaborators with the largest positive (or most negative) balances.

        Args:
            positive: True for balances > 0 (largest first), False for
                      balances < 0 (most negative first)
            limit: Maximum rows (default 5)
        """
        try:
            query = self.client.table("collaborators").select("full_name, badge_number, balance_hours")
            if positive:
                query = query.gt("balance_hours", 0).order("balance_hours", desc=True)
            else:
                query = query.lt("balance_hours", 0).order("balance_hours", desc=False)
            result = query.limit(limit).execute()
            return result.data or []
        except Exception as e:
            kind = "positive" if positive else "negative"
            logger.error(f"Failed to get top {kind} balances: {e}")
            raise

    def get_balance_totals(self) -> Dict[str, float]:
        """
        Sum of positive and of negative balances across all collaborators.

        Delegates to the get_total_positive_negative_hours() SQL function.
        """
        try:
            result = self.client.rpc("get_total_positive_negative_hours", {}).execute()
            row = result.data[0] if result.data else {}
            return {
                "total_positive_hours": float(row.get("total_positive_hours") or 0),
                "total_negative_hours": float(row.get("total_negative_hours") or 0),
            }
        except Exception as e:
            logger.error(f"Failed to get balance totals: {e}")
            raise

    def set_balance(self, collaborator_id: str, new_balance: float) -> Optional[Dict[str, Any]]:
        updated = self.update_collaborator(collaborator_id, {"balance_hours": new_balance})
        logger.debug(f"Set balance of collaborator {collaborator_id} to {new_balance}")
        return updated

    # ========================================================================
    # Time entries
    # ========================================================================

    def insert_time_entry(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert("time_entries", record, "time entry")

    def list_time_entries(self, collaborator_id: str) -> List[Dict[str, Any]]:
        """A collaborator's entries, newest date first (then newest posted)."""
        try:
            result = self.client.table("time_entries").select("*").eq(
                "collaborator_id", collaborator_id
            ).order("date", desc=True).order("created_at", desc=True).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list time entries for {collaborator_id}: {e}")
            raise

    # ========================================================================
    # Time bank periods
    # ========================================================================

    def get_active_period(self) -> Optional[Dict[str, Any]]:
        try:
            result = self.client.table("time_bank_periods").select("*").eq(
                "is_active", True
            ).order("created_at", desc=True).limit(1).execute()
            return _first(result)
        except Exception as e:
            logger.error(f"Failed to get active time bank period: {e}")
            raise

    def start_period(self, start_date: str, end_date: str, admin_id: str) -> Dict[str, Any]:
        """
        Make a new period the active one.

        Any currently active period is deactivated first, so at most one
        period is active at a time.
        """
        try:
            self.client.table("time_bank_periods").update(
                {"is_active": False}
            ).eq("is_active", True).execute()
        except Exception as e:
            logger.error(f"Failed to deactivate current time bank period: {e}")
            raise

        period = self._insert("time_bank_periods", {
            "start_date": start_date,
            "end_date": end_date,
            "is_active": True,
            "admin_id": admin_id,
        }, "time bank period")
        logger.info(f"Started time bank period {start_date} → {end_date}")
        return period

    # ========================================================================
    # Announcements
    # ========================================================================

    def get_latest_announcement(self) -> Optional[Dict[str, Any]]:
        try:
            result = self.client.table("announcements").select(
                "content, created_at"
            ).order("created_at", desc=True).limit(1).execute()
            return _first(result)
        except Exception as e:
            logger.error(f"Failed to get latest announcement: {e}")
            raise

    def replace_announcement(self, content: str, admin_id: str) -> Dict[str, Any]:
        """Store a new announcement, removing every earlier one."""
        try:
            self.client.table("announcements").delete().neq(
                "id", "00000000-0000-0000-0000-000000000000"
            ).execute()
        except Exception as e:
            # The new announcement is still the latest one
            logger.warning(f"Failed to clear old announcements: {e}")

        return self._insert("announcements", {"content": content, "admin_id": admin_id}, "announcement")

    # ========================================================================
    # Info banners
    # ========================================================================

    def list_banners(self) -> List[Dict[str, Any]]:
        try:
            result = self.client.table("info_banners").select(
                "id, image_url, link_url, order_index, is_active"
            ).order("order_index").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list info banners: {e}")
            raise

    def list_active_banners(self) -> List[Dict[str, Any]]:
        """Active banners for the public login page, in display order."""
        try:
            result = self.client.table("info_banners").select(
                "image_url, link_url"
            ).eq("is_active", True).order("order_index").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list active info banners: {e}")
            raise

    def count_banners(self) -> int:
        try:
            result = self.client.table("info_banners").select("id", count="exact", head=True).execute()
            return result.count or 0
        except Exception as e:
            logger.error(f"Failed to count info banners: {e}")
            raise

    def create_banner(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert("info_banners", record, "info banner")

    def update_banner(self, banner_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updates = dict(updates, updated_at=_now_iso())
        return self._update("info_banners", banner_id, updates, "info banner")

    def delete_banner(self, banner_id: str) -> None:
        self._delete("info_banners", banner_id, "info banner")

    # ========================================================================
    # Leave requests
    # ========================================================================

    def create_leave_request(self, record: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(record, status="pending")
        created = self._insert("leave_requests", record, "leave request")
        logger.info(f"Created leave request for collaborator {record.get('collaborator_id')}")
        return created

    def list_leave_requests(self, collaborator_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List leave requests, newest first.

        Args:
            collaborator_id: Only this collaborator's requests. When omitted
                             every request is returned along with the
                             collaborator's name and badge.
        """
        try:
            if collaborator_id:
                query = self.client.table("leave_requests").select("*").eq("collaborator_id", collaborator_id)
            else:
                query = self.client.table("leave_requests").select("*, collaborators(full_name, badge_number)")
            result = query.order("created_at", desc=True).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list leave requests: {e}")
            raise

    def get_leave_request(self, request_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._get_one("leave_requests", "id", request_id)
        except Exception as e:
            logger.error(f"Failed to get leave request {request_id}: {e}")
            raise

    def set_leave_request_status(self, request_id: str, status: str) -> Optional[Dict[str, Any]]:
        return self._update(
            "leave_requests", request_id,
            {"status": status, "updated_at": _now_iso()},
            "leave request"
        )

    # ========================================================================
    # Access code reset requests
    # ========================================================================

    def get_pending_reset_request(self, collaborator_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.client.table("access_code_reset_requests").select("id").eq(
                "collaborator_id", collaborator_id
            ).eq("status", "pending").limit(1).execute()
            return _first(result)
        except Exception as e:
            logger.error(f"Failed to check pending reset requests for {collaborator_id}: {e}")
            raise

    def create_reset_request(self, collaborator_id: str) -> Dict[str, Any]:
        created = self._insert("access_code_reset_requests", {
            "collaborator_id": collaborator_id,
            "status": "pending",
        }, "access code reset request")
        logger.info(f"Created access code reset request for collaborator {collaborator_id}")
        return created

    def list_reset_requests(self) -> List[Dict[str, Any]]:
        try:
            result = self.client.table("access_code_reset_requests").select(
                "*, collaborators(full_name, badge_number, access_code)"
            ).order("requested_at", desc=True).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list access code reset requests: {e}")
            raise

    def get_reset_request(self, request_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._get_one("access_code_reset_requests", "id", request_id)
        except Exception as e:
            logger.error(f"Failed to get access code reset request {request_id}: {e}")
            raise

    def process_reset_request(
        self,
        request_id: str,
        status: str,
        admin_id: str,
        notes: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Record an administrator's decision on a reset request."""
        return self._update("access_code_reset_requests", request_id, {
            "status": status,
            "processed_at": _now_iso(),
            "admin_id": admin_id,
            "notes": notes or None,
        }, "access code reset request")

    # ========================================================================
    # Notifications
    # ========================================================================

    def create_notification(
        self,
        user_id: str,
        user_type: str,
        message: str,
        notification_type: str,
        related_id: Optional[str] = None
    ) -> Dict[str, Any]:
        created = self._insert("notifications", {
            "user_id": user_id,
            "user_type": user_type,
            "message": message,
            "type": notification_type,
            "related_id": related_id,
        }, "notification")
        logger.debug(f"Notified {user_type} {user_id} ({notification_type})")
        return created

    def list_notifications(
        self,
        user_id: str,
        user_type: str,
        unread_only: bool = False,
        limit: int = NOTIFICATION_LIMIT
    ) -> List[Dict[str, Any]]:
        try:
            query = self.client.table("notifications").select("*").eq(
                "user_id", user_id
            ).eq("user_type", user_type)
            if unread_only:
                query = query.eq("is_read", False)
            result = query.order("created_at", desc=True).limit(limit).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list notifications for {user_type} {user_id}: {e}")
            raise

    def mark_notifications_read(self, notification_ids: List[str], user_id: str, user_type: str) -> int:
        """
        Mark notifications as read.

        Only rows owned by (user_id, user_type) are touched, so a caller
        cannot mark someone else's notifications.

        Returns:
            Number of notifications updated
        """
        try:
            result = self.client.table("notifications").update(
                {"is_read": True, "updated_at": _now_iso()}
            ).in_("id", notification_ids).eq("user_id", user_id).eq("user_type", user_type).execute()
            updated = len(result.data or [])
            logger.debug(f"Marked {updated} notifications as read for {user_type} {user_id}")
            return updated
        except Exception as e:
            logger.error(f"Failed to mark notifications as read: {e}")
            raise
