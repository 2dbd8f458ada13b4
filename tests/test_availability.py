from datetime import date, timedelta
from types import SimpleNamespace

from academy.services.availability import Severity, availability, capacity_display

TODAY = date(2026, 3, 10)


def _slot(capacity, booked, is_active=True, slot_date=TODAY):
    return SimpleNamespace(capacity=capacity, booked_count=booked, is_active=is_active, slot_date=slot_date)


class TestCapacityDisplay:
    def test_unlimited(self):
        assert capacity_display(None, 40) == (None, "Unlimited", Severity.HEALTHY)

    def test_full(self):
        assert capacity_display(5, 5) == (0, "Slot full", Severity.FULL)

    def test_overbooked_counts_as_full(self):
        assert capacity_display(5, 7)[0] == 0

    def test_low_at_twenty_percent(self):
        assert capacity_display(10, 8)[2] == Severity.LOW

    def test_medium_at_half(self):
        assert capacity_display(10, 5)[2] == Severity.MEDIUM

    def test_healthy_above_half(self):
        remaining, text, severity = capacity_display(10, 4)
        assert (remaining, text, severity) == (6, "6 remaining", Severity.HEALTHY)


class TestAvailability:
    def test_one_seat_left_is_red_but_bookable(self):
        """Capacity 10 with 9 booked: one remaining, red, still bookable."""
        result = availability(_slot(10, 9), TODAY)
        assert result.remaining == 1
        assert result.color == "red"
        assert result.bookable

    def test_full_slot_not_bookable(self):
        result = availability(_slot(5, 5), TODAY)
        assert result.color == "red"
        assert not result.bookable

    def test_inactive_slot_not_bookable(self):
        assert not availability(_slot(None, 0, is_active=False), TODAY).bookable

    def test_past_slot_not_bookable(self):
        assert not availability(_slot(None, 0, slot_date=TODAY - timedelta(days=1)), TODAY).bookable

    def test_today_is_still_bookable(self):
        assert availability(_slot(3, 0), TODAY).bookable

    def test_unlimited_is_green(self):
        result = availability(_slot(None, 100), TODAY)
        assert result.remaining_text == "Unlimited"
        assert result.color == "green"
