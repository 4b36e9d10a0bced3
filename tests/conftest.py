"""
Test configuration.

Environment is set BEFORE any app import: an in-memory SQLite database
shared by every session, no Redis, no SMTP, logs in a temp directory.
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["REDIS_URL"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="hotel-booking-logs-")

from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_db
from app.core.jwt import create_access_token
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import app
from app.models.booking import Booking
from app.models.enums import BookingStatus, MembershipTier, PaymentMethod, PaymentStatus, Role
from app.models.hotel import Hotel
from app.models.payment import Payment
from app.models.room import Room, RoomUnavailablePeriod
from app.models.user import User


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def side_effects(monkeypatch):
    """Celery scheduling and mail are replaced by mocks in every test."""
    mocks = SimpleNamespace(
        schedule_payment_timeout=MagicMock(),
        send_refund_notice=MagicMock(return_value=True),
        send_payment_status_notice=MagicMock(return_value=True),
        task_notice=MagicMock(return_value=True),
    )
    monkeypatch.setattr("app.services.booking_service.schedule_payment_timeout", mocks.schedule_payment_timeout)
    monkeypatch.setattr("app.services.booking_service.send_refund_notice", mocks.send_refund_notice)
    monkeypatch.setattr("app.services.payment_service.send_payment_status_notice", mocks.send_payment_status_notice)
    monkeypatch.setattr("app.tasks.payment_tasks.send_payment_status_notice", mocks.task_notice)
    return mocks


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def hotel(db):
    hotel = Hotel(name="TCC Riverside", address="1 River Rd", tel="0212345678")
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    return hotel


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=Role.USER, hotel=None, points=0.0, tier=MembershipTier.NONE, credit=0.0):
        counter["n"] += 1
        user = User(
            name=f"{role.value} {counter['n']}",
            tel="0812345678",
            email=f"{role.value.lower()}{counter['n']}@example.com",
            password_hash="unused",
            role=role,
            responsible_hotel_id=hotel.id if hotel is not None else None,
            credit=credit,
            membership_points=points,
            membership_tier=tier,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def guest(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN)


@pytest.fixture
def manager(make_user, hotel):
    return make_user(Role.HOTEL_MANAGER, hotel=hotel)


@pytest.fixture
def make_room(db, hotel):
    counter = {"n": 100}

    def _make(price=1000.0, periods=()):
        counter["n"] += 1
        room = Room(hotel_id=hotel.id, number=counter["n"], price=price)
        room.unavailable_periods = [
            RoomUnavailablePeriod(start_date=start, end_date=end) for start, end in periods
        ]
        db.add(room)
        db.commit()
        db.refresh(room)
        return room

    return _make


@pytest.fixture
def room(make_room):
    return make_room()


@pytest.fixture
def make_booking(db):
    """A booking with its reserved period and a payment in the given state."""

    def _make(
        user,
        room,
        check_in,
        check_out,
        status=BookingStatus.CONFIRMED,
        payment_status=PaymentStatus.COMPLETED,
        amount=None,
    ):
        booking = Booking(
            user_id=user.id,
            room_id=room.id,
            hotel_id=room.hotel_id,
            check_in_date=check_in,
            check_out_date=check_out,
            status=status,
            tier_at_booking=user.membership_tier,
        )
        db.add(booking)
        db.flush()

        room.unavailable_periods.append(
            RoomUnavailablePeriod(booking_id=booking.id, start_date=check_in, end_date=check_out)
        )

        nights = (check_out - check_in).days
        payment = Payment(
            booking_id=booking.id,
            user_id=user.id,
            amount=amount if amount is not None else room.price * nights,
            status=payment_status,
            method=PaymentMethod.CARD,
        )
        db.add(payment)
        db.commit()
        db.refresh(booking)
        db.refresh(payment)
        return booking, payment

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.email, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def future():
    """Midnight ten days from now; far enough ahead for the 90% refund band."""
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    return today + timedelta(days=10)
