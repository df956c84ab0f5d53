"""Brazilian date formatting (dd/mm/yyyy) for messages and reports."""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[str, date, datetime, None]


def _parse(value: DateLike) -> Optional[datetime]:
    """Parse an ISO 8601 string, date or datetime; None when it can't be read."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def format_brazilian_date(value: DateLike) -> str:
    """
    Format a date as dd/mm/yyyy.

    Args:
        value: ISO string ("2024-06-15", "2024-06-15T10:30:00Z"), date or datetime

    Returns:
        Formatted date, or "Data inválida" if value can't be parsed
    """
    parsed = _parse(value)
    if parsed is None:
        return "Data inválida"
    return parsed.strftime("%d/%m/%Y")


def format_brazilian_datetime(value: DateLike) -> str:
    """Format a timestamp as dd/mm/yyyy HH:MM ("Data/Hora inválida" if unreadable)."""
    parsed = _parse(value)
    if parsed is None:
        return "Data/Hora inválida"
    return parsed.strftime("%d/%m/%Y %H:%M")
