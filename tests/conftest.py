import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, time, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from academy.core.security import create_access_token, get_password_hash
from academy.db.base import Base
from academy.db.session import get_db
from academy.main import app
from academy.models.catalog import CatalogItem, OrderKind
from academy.models.slot import Slot
from academy.models.user import User
from academy.services.notifications import Notifier, get_notifier

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier(Notifier):
    """Collects notifier calls; optionally fails like a broken mail server."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.status_changes = []
        self.link_reminders = []

    def booking_status_changed(self, booking):
        if self.fail:
            raise RuntimeError("smtp down")
        self.status_changes.append((booking.id, booking.status))

    def link_available(self, booking):
        if self.fail:
            raise RuntimeError("smtp down")
        self.link_reminders.append(booking.id)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, notifier):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, email, role="user"):
    user = User(
        email=email,
        password_hash=get_password_hash("secret123"),
        full_name=email.split("@")[0].title(),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return _make_user(db, "asha@example.com")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin@example.com", role="admin")


@pytest.fixture
def user_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin.id, role='admin')}"}


@pytest.fixture
def make_slot(db):
    def _make(days_ahead=1, start=time(14, 0), end=time(15, 0), capacity=None, booked=0, price=0, **extra):
        slot = Slot(
            slot_date=date.today() + timedelta(days=days_ahead),
            start_time=start,
            end_time=end,
            capacity=capacity,
            booked_count=booked,
            price=price,
            meeting_link=extra.pop("meeting_link", "https://meet.example.com/abc"),
            **extra,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make


@pytest.fixture
def make_item(db):
    def _make(kind=OrderKind.COURSE, title="Python Basics", price=1000, sale_price=None, **extra):
        item = CatalogItem(
            kind=kind,
            title=title,
            slug=extra.pop("slug", title.lower().replace(" ", "-")),
            price=price,
            sale_price=sale_price,
            **extra,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture
def failing_notifier():
    return RecordingNotifier(fail=True)
