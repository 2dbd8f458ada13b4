import asyncio
import contextlib
import time as clock
from datetime import date, datetime, time, timedelta

from academy.core.config import settings
from academy.models.booking import Booking, BookingStatus
from academy.models.notification import Notification
from academy.utils import reminders
from academy.utils.reminders import send_link_reminders
from academy.utils.timeslots import deactivate_past_slots, to_local_naive


def _book(db, slot, status=BookingStatus.CONFIRMED, user=None):
    booking = Booking(
        slot_id=slot.id,
        user_id=user.id if user else None,
        name="Asha",
        email="asha@example.com",
        phone="9876543210",
        status=status.value,
    )
    db.add(booking)
    db.commit()
    return booking


class TestLinkReminders:
    def test_sends_once_when_window_opens(self, db, make_slot, notifier, user):
        slot = make_slot(days_ahead=0, start=time(14, 0), end=time(15, 0))
        booking = _book(db, slot, user=user)
        now = datetime.combine(date.today(), time(13, 55))

        assert send_link_reminders(db, notifier, now) == 1
        assert send_link_reminders(db, notifier, now + timedelta(minutes=1)) == 0
        assert notifier.link_reminders == [booking.id]

        db.refresh(booking)
        assert booking.link_notified_at == now
        assert db.query(Notification).filter(Notification.type == "link_available").count() == 1

    def test_waits_for_the_window(self, db, make_slot, notifier):
        slot = make_slot(days_ahead=0, start=time(14, 0))
        _book(db, slot)
        assert send_link_reminders(db, notifier, datetime.combine(date.today(), time(13, 0))) == 0

    def test_skips_unconfirmed(self, db, make_slot, notifier):
        slot = make_slot(days_ahead=0, start=time(14, 0))
        _book(db, slot, status=BookingStatus.PENDING)
        assert send_link_reminders(db, notifier, datetime.combine(date.today(), time(13, 55))) == 0

    def test_mail_failure_still_marks_booking(self, db, make_slot, failing_notifier):
        slot = make_slot(days_ahead=0, start=time(14, 0))
        booking = _book(db, slot)
        assert send_link_reminders(db, failing_notifier, datetime.combine(date.today(), time(13, 55))) == 1
        db.refresh(booking)
        assert booking.link_notified_at is not None

    def test_slot_just_after_midnight_is_reminded_the_evening_before(self, db, make_slot, notifier):
        """A 00:05 slot opens at 23:55 the previous day."""
        slot = make_slot(days_ahead=1, start=time(0, 5), end=time(1, 0))
        booking = _book(db, slot)
        now = datetime.combine(date.today(), time(23, 56))
        assert send_link_reminders(db, notifier, now) == 1
        assert notifier.link_reminders == [booking.id]

    def test_tomorrow_afternoon_is_not_due_tonight(self, db, make_slot, notifier):
        slot = make_slot(days_ahead=1, start=time(14, 0))
        _book(db, slot)
        assert send_link_reminders(db, notifier, datetime.combine(date.today(), time(23, 56))) == 0


class TestReminderLoop:
    def test_event_loop_keeps_ticking_during_a_slow_pass(self, monkeypatch):
        """A pass blocked on SMTP must not stall other coroutines."""
        calls = []

        def slow_pass():
            calls.append(1)
            clock.sleep(0.5)

        monkeypatch.setattr(reminders, "run_reminders_once", slow_pass)
        monkeypatch.setattr(settings, "REMINDER_INTERVAL_SECONDS", 0.01)

        async def heartbeat():
            task = asyncio.create_task(reminders.reminder_loop())
            gaps = []
            last = clock.monotonic()
            for _ in range(8):
                await asyncio.sleep(0.05)
                current = clock.monotonic()
                gaps.append(current - last)
                last = current
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            return gaps

        gaps = asyncio.run(heartbeat())
        assert calls
        assert max(gaps) < 0.3

    def test_failed_pass_does_not_stop_the_loop(self, monkeypatch):
        calls = []

        def broken_pass():
            calls.append(1)
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(reminders, "run_reminders_once", broken_pass)
        monkeypatch.setattr(settings, "REMINDER_INTERVAL_SECONDS", 0.01)

        async def run_briefly():
            task = asyncio.create_task(reminders.reminder_loop())
            await asyncio.sleep(0.2)
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        asyncio.run(run_briefly())
        assert len(calls) >= 2


class TestSlotCleanup:
    def test_only_earlier_dates_are_deactivated(self, db, make_slot):
        past = make_slot(days_ahead=-1)
        today = make_slot(days_ahead=0, start=time(0, 5))
        assert deactivate_past_slots(db) == 1
        db.refresh(past)
        db.refresh(today)
        assert past.is_active is False
        assert today.is_active is True


class TestToLocalNaive:
    def test_naive_passes_through(self):
        value = datetime(2026, 1, 1, 9, 0)
        assert to_local_naive(value) is value

    def test_none(self):
        assert to_local_naive(None) is None
