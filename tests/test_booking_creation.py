from datetime import datetime, timedelta

import pytest

from app.core.exceptions import (
    Forbidden,
    InvalidDateRange,
    InvalidPaymentMethod,
    RoomNotFound,
    RoomUnavailable,
    StayTooLong,
)
from app.models.booking import Booking
from app.models.enums import BookingStatus, MembershipTier, PaymentMethod, PaymentStatus
from app.models.log import Log
from app.models.payment import Payment
from app.services.booking_service import create_booking

CHECK_IN = datetime(2030, 4, 25, 14)


def test_create_booking_opens_pending_booking_and_unpaid_payment(db, room, guest, side_effects):
    booking, payment = create_booking(db, room.id, guest, CHECK_IN, CHECK_IN + timedelta(days=2))

    assert booking.status == BookingStatus.PENDING
    assert booking.hotel_id == room.hotel_id
    assert payment.status == PaymentStatus.UNPAID
    assert payment.method == PaymentMethod.CARD
    assert payment.amount == pytest.approx(2 * room.price)
    assert payment.booking_id == booking.id

    db.refresh(room)
    assert [(p.start_date, p.end_date, p.booking_id) for p in room.unavailable_periods] == [
        (CHECK_IN, CHECK_IN + timedelta(days=2), booking.id)
    ]

    side_effects.schedule_payment_timeout.assert_called_once_with(payment.id)
    assert db.query(Log).filter(Log.user_id == guest.id).count() == 1


def test_tier_is_snapshotted_at_booking(db, room, make_user):
    gold = make_user(points=300, tier=MembershipTier.GOLD)
    booking, _ = create_booking(db, room.id, gold, CHECK_IN, CHECK_IN + timedelta(days=1), "ThaiQR")
    assert booking.tier_at_booking == MembershipTier.GOLD


def test_overlapping_request_creates_nothing(db, make_room, guest, side_effects):
    room = make_room(periods=[(CHECK_IN, CHECK_IN + timedelta(days=2))])

    with pytest.raises(RoomUnavailable):
        create_booking(db, room.id, guest, CHECK_IN + timedelta(days=1), CHECK_IN + timedelta(days=3))

    assert db.query(Booking).count() == 0
    assert db.query(Payment).count() == 0
    db.refresh(room)
    assert len(room.unavailable_periods) == 1
    side_effects.schedule_payment_timeout.assert_not_called()


def test_back_to_back_stays_are_allowed(db, make_room, guest):
    room = make_room(periods=[(CHECK_IN, CHECK_IN + timedelta(days=2))])
    booking, _ = create_booking(db, room.id, guest, CHECK_IN + timedelta(days=2), CHECK_IN + timedelta(days=3))
    assert booking.id is not None


def test_payment_method_is_checked_first(db, guest):
    # Bad method wins over bad dates and a missing room
    with pytest.raises(InvalidPaymentMethod):
        create_booking(db, 999, guest, CHECK_IN, CHECK_IN - timedelta(days=1), "Cash")


def test_date_order_is_checked_before_room(db, guest):
    with pytest.raises(InvalidDateRange):
        create_booking(db, 999, guest, CHECK_IN, CHECK_IN)


def test_stay_length_is_checked_before_room(db, guest):
    with pytest.raises(StayTooLong):
        create_booking(db, 999, guest, CHECK_IN, CHECK_IN + timedelta(days=4))


def test_admin_may_book_longer_stays(db, room, admin):
    booking, payment = create_booking(db, room.id, admin, CHECK_IN, CHECK_IN + timedelta(days=7))
    assert payment.amount == pytest.approx(7 * room.price)
    assert booking.user_id == admin.id


def test_missing_room(db, guest):
    with pytest.raises(RoomNotFound):
        create_booking(db, 999, guest, CHECK_IN, CHECK_IN + timedelta(days=1))


def test_hotel_manager_cannot_create_bookings(db, room, manager):
    with pytest.raises(Forbidden):
        create_booking(db, room.id, manager, CHECK_IN, CHECK_IN + timedelta(days=1))


# ---------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------
def test_post_booking_returns_booking_and_payment(client, room, guest, auth_headers):
    res = client.post(
        f"/rooms/{room.id}/bookings",
        json={
            "check_in_date": "2030-04-25T14:00:00Z",
            "check_out_date": "2030-04-26T14:00:00Z",
            "method": "Bank",
        },
        headers=auth_headers(guest),
    )

    assert res.status_code == 201
    body = res.json()
    assert body["booking"]["status"] == "pending"
    assert body["booking"]["room_id"] == room.id
    assert body["payment"]["status"] == "unpaid"
    assert body["payment"]["method"] == "Bank"
    assert body["payment"]["amount"] == room.price


def test_post_booking_on_taken_dates_is_400(client, make_room, guest, auth_headers):
    room = make_room(periods=[(CHECK_IN, CHECK_IN + timedelta(days=1))])

    res = client.post(
        f"/rooms/{room.id}/bookings",
        json={"check_in_date": "2030-04-25T14:00:00", "check_out_date": "2030-04-26T14:00:00"},
        headers=auth_headers(guest),
    )

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "RoomUnavailable"
    assert body["message"]


def test_post_booking_with_bad_method_is_400(client, room, guest, auth_headers):
    res = client.post(
        f"/rooms/{room.id}/bookings",
        json={"check_in_date": "2030-04-25T14:00:00", "check_out_date": "2030-04-26T14:00:00", "method": "Cash"},
        headers=auth_headers(guest),
    )
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidPaymentMethod"


def test_post_booking_without_token_is_401(client, room):
    res = client.post(
        f"/rooms/{room.id}/bookings",
        json={"check_in_date": "2030-04-25T14:00:00", "check_out_date": "2030-04-26T14:00:00"},
    )
    assert res.status_code == 401


def test_post_booking_as_manager_is_403(client, room, manager, auth_headers):
    res = client.post(
        f"/rooms/{room.id}/bookings",
        json={"check_in_date": "2030-04-25T14:00:00", "check_out_date": "2030-04-26T14:00:00"},
        headers=auth_headers(manager),
    )
    assert res.status_code == 403
    assert res.json()["error"] == "Forbidden"
