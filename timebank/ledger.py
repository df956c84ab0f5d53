"""
Balance arithmetic for the time bank.

A collaborator's balance_hours is the running sum of every entry's signed
change. Each posted entry records its own change (balance_hours on the
time_entries row) so the history explains the balance.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, Optional, Union


@dataclass(frozen=True)
class EntryEffect:
    """What posting one time entry does to a balance."""
    balance_change: float
    overtime_hours: float
    new_balance: float


@dataclass(frozen=True)
class TimeRemaining:
    """Countdown to the end of a time bank period."""
    days: int
    hours: int
    minutes: int
    seconds: int

    @property
    def expired(self) -> bool:
        return not (self.days or self.hours or self.minutes or self.seconds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "expired": self.expired,
        }


def apply_entry(current_balance: Optional[float], entry_type: str, hours: float) -> EntryEffect:
    """
    Compute the effect of posting hours on a collaborator's balance.

    Args:
        current_balance: Balance before the entry (None counts as 0)
        entry_type: 'positive' (credit), 'negative' (debit) or 'overtime'
                    (credit, also recorded as overtime hours)
        hours: Hours posted, always a positive amount

    Returns:
        EntryEffect with the signed change, the overtime part and the new balance

    Raises:
        ValueError: If entry_type is not one of the three known types
    """
    balance = float(current_balance or 0)
    overtime = 0.0

    if entry_type == "positive":
        change = hours
    elif entry_type == "negative":
        change = -hours
    elif entry_type == "overtime":
        change = hours
        overtime = hours
    else:
        raise ValueError(f"Unknown entry type: {entry_type!r}")

    return EntryEffect(
        balance_change=change,
        overtime_hours=overtime,
        new_balance=balance + change,
    )


def summarize_balances(collaborators: Iterable[Dict[str, Any]]) -> Dict[str, float]:
    """
    Split a group's balances into a positive total and a negative total.

    Zero balances land in the negative bucket, where they add nothing.
    """
    total_positive = 0.0
    total_negative = 0.0
    for collaborator in collaborators:
        balance = float(collaborator.get("balance_hours") or 0)
        if balance > 0:
            total_positive += balance
        else:
            total_negative += balance
    return {
        "total_positive_hours": total_positive,
        "total_negative_hours": total_negative,
    }


def _as_utc_datetime(value: Union[str, date, datetime]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def time_remaining(end: Union[str, date, datetime], now: Optional[datetime] = None) -> TimeRemaining:
    """
    Time left until a period ends (all zeros once it has ended).

    Date-only ends are read as midnight UTC of that day. Naive datetimes
    are taken as UTC.
    """
    end_at = _as_utc_datetime(end)
    now = _as_utc_datetime(now) if now is not None else datetime.now(timezone.utc)

    total_seconds = int((end_at - now).total_seconds())
    if total_seconds <= 0:
        return TimeRemaining(0, 0, 0, 0)

    days, rest = divmod(total_seconds, 24 * 60 * 60)
    hours, rest = divmod(rest, 60 * 60)
    minutes, seconds = divmod(rest, 60)
    return TimeRemaining(days, hours, minutes, seconds)
