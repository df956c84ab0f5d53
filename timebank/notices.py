"""Notification texts sent to collaborators (Brazilian Portuguese)."""

from typing import Optional

from utils.date_helpers import format_brazilian_date

LEAVE_REQUEST_STATUS = "leave_request_status"
ACCESS_CODE_RESET_STATUS = "access_code_reset_status"
TEST_NOTIFICATION = "test_notification"

_DECISION_LABELS = {
    "approved": "APROVADA",
    "rejected": "REJEITADA",
}


def leave_decision_message(start_date: str, end_date: str, status: str) -> str:
    label = _DECISION_LABELS[status]
    return (
        f"Sua solicitação de folga de {format_brazilian_date(start_date)} "
        f"a {format_brazilian_date(end_date)} foi {label}."
    )


def reset_decision_message(status: str, new_access_code: Optional[str] = None, notes: Optional[str] = None) -> str:
    if status == "approved":
        return (
            "Sua solicitação de redefinição de código de acesso foi APROVADA. "
            f"Seu novo código é: {new_access_code}."
        )
    return (
        "Sua solicitação de redefinição de código de acesso foi REJEITADA. "
        f"Notas: {notes or 'N/A'}."
    )
