"""Tests for Brazilian date formatting, password hashing and notification texts."""

from datetime import date, datetime

from timebank import notices
from utils.date_helpers import format_brazilian_date, format_brazilian_datetime
from utils.passwords import hash_password, verify_password


class TestDateHelpers:
    """Tests for format_brazilian_date / format_brazilian_datetime."""

    def test_iso_date(self):
        assert format_brazilian_date("2024-06-15") == "15/06/2024"

    def test_iso_timestamp_with_z(self):
        assert format_brazilian_date("2024-06-15T10:30:00Z") == "15/06/2024"
        assert format_brazilian_datetime("2024-06-15T10:30:00Z") == "15/06/2024 10:30"

    def test_date_and_datetime_objects(self):
        assert format_brazilian_date(date(2024, 1, 2)) == "02/01/2024"
        assert format_brazilian_datetime(datetime(2024, 1, 2, 8, 5)) == "02/01/2024 08:05"

    def test_invalid_input(self):
        assert format_brazilian_date("not a date") == "Data inválida"
        assert format_brazilian_date(None) == "Data inválida"
        assert format_brazilian_datetime("") == "Data/Hora inválida"


class TestPasswords:
    """Tests for bcrypt hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret!", rounds=4)
        assert hashed.startswith("$2")
        assert verify_password("s3cret!", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_default_cost(self):
        assert hash_password("s3cret!").split("$")[2] == "10"

    def test_malformed_hash_never_matches(self):
        assert verify_password("s3cret!", "not-a-bcrypt-hash") is False
        assert verify_password("s3cret!", "") is False

    def test_long_password_uses_first_72_bytes(self):
        password = "é" * 40
        hashed = hash_password(password, rounds=4)

        assert verify_password(password, hashed) is True
        assert verify_password("é" * 36, hashed) is True
        assert verify_password("é" * 35, hashed) is False


class TestNotices:
    """Tests for notification texts."""

    def test_leave_approved(self):
        message = notices.leave_decision_message("2024-07-01", "2024-07-05", "approved")
        assert message == "Sua solicitação de folga de 01/07/2024 a 05/07/2024 foi APROVADA."

    def test_leave_rejected(self):
        assert "REJEITADA" in notices.leave_decision_message("2024-07-01", "2024-07-01", "rejected")

    def test_reset_approved_includes_new_code(self):
        message = notices.reset_decision_message("approved", new_access_code="8765")
        assert "APROVADA" in message
        assert "8765" in message

    def test_reset_rejected_notes(self):
        assert "Notas: Procure o RH." in notices.reset_decision_message("rejected", notes="Procure o RH")
        assert "Notas: N/A." in notices.reset_decision_message("rejected")
