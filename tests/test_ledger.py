"""Tests for balance arithmetic and period countdowns."""

from datetime import date, datetime, timezone
import pytest

from timebank.ledger import apply_entry, summarize_balances, time_remaining


class TestApplyEntry:
    """Tests for apply_entry()."""

    def test_positive_entry_credits(self):
        effect = apply_entry(10, "positive", 2.5)
        assert effect.balance_change == 2.5
        assert effect.overtime_hours == 0
        assert effect.new_balance == 12.5

    def test_negative_entry_debits(self):
        effect = apply_entry(1, "negative", 3)
        assert effect.balance_change == -3
        assert effect.new_balance == -2

    def test_overtime_credits_and_records_overtime(self):
        effect = apply_entry(0, "overtime", 4)
        assert effect.balance_change == 4
        assert effect.overtime_hours == 4
        assert effect.new_balance == 4

    def test_missing_balance_counts_as_zero(self):
        assert apply_entry(None, "positive", 1).new_balance == 1

    def test_numeric_string_balance(self):
        """PostgREST returns NUMERIC columns as strings."""
        assert apply_entry("7.50", "negative", 0.5).new_balance == 7.0

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            apply_entry(0, "bonus", 1)


class TestSummarizeBalances:
    """Tests for summarize_balances()."""

    def test_splits_positive_and_negative(self):
        totals = summarize_balances([
            {"balance_hours": 5},
            {"balance_hours": -2.5},
            {"balance_hours": "3.5"},
            {"balance_hours": 0},
            {"balance_hours": None},
        ])
        assert totals == {"total_positive_hours": 8.5, "total_negative_hours": -2.5}

    def test_empty_group(self):
        assert summarize_balances([]) == {"total_positive_hours": 0.0, "total_negative_hours": 0.0}


class TestTimeRemaining:
    """Tests for time_remaining()."""

    NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_countdown_to_date(self):
        remaining = time_remaining("2024-06-03", now=self.NOW)
        assert (remaining.days, remaining.hours, remaining.minutes, remaining.seconds) == (1, 12, 0, 0)
        assert remaining.expired is False

    def test_countdown_to_timestamp(self):
        remaining = time_remaining("2024-06-01T13:30:15Z", now=self.NOW)
        assert remaining.to_dict() == {
            "days": 0, "hours": 1, "minutes": 30, "seconds": 15, "expired": False,
        }

    def test_ended_period_is_all_zeros(self):
        remaining = time_remaining(date(2024, 5, 31), now=self.NOW)
        assert remaining.expired is True
        assert remaining.to_dict()["days"] == 0

    def test_naive_now_taken_as_utc(self):
        remaining = time_remaining("2024-06-02", now=datetime(2024, 6, 1, 0, 0, 0))
        assert remaining.days == 1
