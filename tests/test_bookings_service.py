from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from academy.core.context import RequestContext
from academy.core.exceptions import CapacityExceededError, NotFoundError, ValidationError
from academy.db.base import Base
from academy.models.booking import Booking, BookingStatus
from academy.models.slot import Slot
from academy.schemas.booking import BookingCreate
from academy.schemas.slot import SlotCreate, SlotUpdate
from academy.services import bookings as booking_service


def _payload(slot, **overrides):
    data = dict(slot_id=slot.id, name="Asha", email="asha@example.com", phone="9876543210")
    data.update(overrides)
    return BookingCreate(**data)


class TestCreateBooking:
    def test_guest_booking_takes_a_seat(self, db, make_slot):
        """A guest booking is PENDING and increments booked_count."""
        slot = make_slot(capacity=3)
        booking = booking_service.create_booking(db, RequestContext(), _payload(slot))
        db.refresh(slot)
        assert booking.status == BookingStatus.PENDING.value
        assert booking.user_id is None
        assert slot.booked_count == 1

    def test_signed_in_booking_is_linked_to_user(self, db, make_slot, user):
        slot = make_slot()
        booking = booking_service.create_booking(db, RequestContext(user=user), _payload(slot))
        assert booking.user_id == user.id

    def test_full_slot_raises_capacity_exceeded(self, db, make_slot):
        """Capacity 5 with 5 booked must fail, not silently succeed."""
        slot = make_slot(capacity=5, booked=5)
        with pytest.raises(CapacityExceededError):
            booking_service.create_booking(db, RequestContext(), _payload(slot))
        db.refresh(slot)
        assert slot.booked_count == 5
        assert db.query(Booking).count() == 0

    def test_last_seat_then_full(self, db, make_slot):
        slot = make_slot(capacity=2, booked=1)
        booking_service.create_booking(db, RequestContext(), _payload(slot))
        with pytest.raises(CapacityExceededError):
            booking_service.create_booking(db, RequestContext(), _payload(slot, email="ravi@example.com"))

    def test_racing_for_the_last_seat_books_it_once(self, tmp_path):
        """Two sessions that both saw a free seat cannot both take it."""
        engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}", connect_args={"check_same_thread": False})
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        setup = Session()
        slot = Slot(slot_date=date.today() + timedelta(days=1), start_time=time(14, 0), capacity=1, booked_count=0)
        setup.add(slot)
        setup.commit()
        slot_id = slot.id
        setup.close()

        first, second = Session(), Session()
        try:
            for session in (first, second):
                seen = session.get(Slot, slot_id)
                assert (seen.capacity, seen.booked_count) == (1, 0)

            payload = BookingCreate(slot_id=slot_id, name="Asha", email="asha@example.com", phone="9876543210")
            booking_service.create_booking(first, RequestContext(), payload)
            with pytest.raises(CapacityExceededError):
                booking_service.create_booking(second, RequestContext(), payload.model_copy(update={"email": "ravi@example.com"}))
        finally:
            first.close()
            second.close()

        check = Session()
        try:
            assert check.get(Slot, slot_id).booked_count == 1
            assert check.query(Booking).count() == 1
        finally:
            check.close()
            engine.dispose()

    def test_unlimited_slot_never_fills(self, db, make_slot):
        slot = make_slot(capacity=None, booked=500)
        booking_service.create_booking(db, RequestContext(), _payload(slot))
        db.refresh(slot)
        assert slot.booked_count == 501

    def test_blank_required_field(self, db, make_slot):
        slot = make_slot()
        with pytest.raises(ValidationError) as exc:
            booking_service.create_booking(db, RequestContext(), _payload(slot, name="   "))
        assert exc.value.details == {"field": "name"}

    def test_inactive_slot_not_found(self, db, make_slot):
        slot = make_slot(is_active=False)
        with pytest.raises(NotFoundError):
            booking_service.create_booking(db, RequestContext(), _payload(slot))

    def test_past_slot_rejected(self, db, make_slot):
        slot = make_slot(days_ahead=-1)
        with pytest.raises(ValidationError):
            booking_service.create_booking(db, RequestContext(), _payload(slot))


class TestSlots:
    def test_upcoming_hides_past_and_inactive(self, db, make_slot):
        upcoming = make_slot(days_ahead=2)
        make_slot(days_ahead=-2)
        make_slot(days_ahead=3, is_active=False)
        slots = booking_service.list_upcoming_slots(db, RequestContext())
        assert [s.id for s in slots] == [upcoming.id]

    def test_create_rejects_zero_capacity(self, db):
        with pytest.raises(ValidationError):
            booking_service.create_slot(db, SlotCreate(slot_date=datetime.now().date(), capacity=0))

    def test_capacity_cannot_drop_below_bookings(self, db, make_slot):
        slot = make_slot(capacity=5, booked=3)
        with pytest.raises(ValidationError):
            booking_service.update_slot(db, slot.id, SlotUpdate(capacity=2))

    def test_null_capacity_makes_slot_unlimited(self, db, make_slot):
        slot = make_slot(capacity=5)
        updated = booking_service.update_slot(db, slot.id, SlotUpdate(capacity=None))
        assert updated.capacity is None

    def test_omitted_capacity_is_left_alone(self, db, make_slot):
        slot = make_slot(capacity=5)
        updated = booking_service.update_slot(db, slot.id, SlotUpdate(price=200))
        assert updated.capacity == 5
        assert updated.price == 200

    def test_delete_with_bookings_deactivates(self, db, make_slot):
        slot = make_slot()
        booking_service.create_booking(db, RequestContext(), _payload(slot))
        assert booking_service.delete_slot(db, slot.id) == "deactivated"
        db.refresh(slot)
        assert slot.is_active is False

    def test_delete_without_bookings(self, db, make_slot):
        slot = make_slot()
        assert booking_service.delete_slot(db, slot.id) == "deleted"
        with pytest.raises(NotFoundError):
            booking_service.get_slot(db, slot.id)


class TestMyBookingsAndAccess:
    def test_guest_lookup_by_email(self, db, make_slot):
        slot = make_slot()
        booking_service.create_booking(db, RequestContext(), _payload(slot))
        booking_service.create_booking(db, RequestContext(), _payload(slot, email="ravi@example.com"))
        mine = booking_service.list_my_bookings(db, RequestContext(), "asha@example.com")
        assert [b.email for b in mine] == ["asha@example.com"]

    def test_signed_in_user_sees_earlier_guest_bookings(self, db, make_slot, user):
        """Guest bookings made before sign-up show up once the account exists."""
        slot = make_slot()
        guest = booking_service.create_booking(db, RequestContext(), _payload(slot, email="ASHA@example.com"))
        own = booking_service.create_booking(db, RequestContext(user=user), _payload(slot))
        booking_service.create_booking(db, RequestContext(), _payload(slot, email="ravi@example.com"))

        mine = booking_service.list_my_bookings(db, RequestContext(user=user))
        assert {b.id for b in mine} == {guest.id, own.id}

        _, access = booking_service.get_booking_access(db, RequestContext(user=user), guest.id)
        assert access.can_access_link is False

    def test_no_identity_returns_nothing(self, db):
        assert booking_service.list_my_bookings(db, RequestContext()) == []

    def test_access_requires_ownership(self, db, make_slot):
        slot = make_slot()
        booking = booking_service.create_booking(db, RequestContext(), _payload(slot))
        with pytest.raises(NotFoundError):
            booking_service.get_booking_access(db, RequestContext(), booking.id, "someone@example.com")

    def test_access_for_confirmed_booking_in_window(self, db, make_slot):
        slot = make_slot(days_ahead=0)
        booking = booking_service.create_booking(db, RequestContext(), _payload(slot))
        booking.status = BookingStatus.CONFIRMED.value
        db.commit()
        now = slot.scheduled_start() - timedelta(minutes=5)
        _, access = booking_service.get_booking_access(db, RequestContext(now=now), booking.id, "ASHA@example.com")
        assert access.can_access_link
