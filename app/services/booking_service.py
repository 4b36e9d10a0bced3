"""
Booking creation and lifecycle.

Status adjacency::

    pending   -> confirmed | canceled
    confirmed -> checkedIn | canceled     (admin may also revert to pending)
    checkedIn -> completed | canceled
    completed, canceled: terminal

A request changes either the status or the dates, never both. Each
operation runs in a single transaction with the booking and room rows
locked, so booking, room periods, payment and user accumulators move
together or not at all. Mail and audit entries are written after commit
and never fail the request.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from app.core import config
from app.core.exceptions import (
    BookingNotCancelable,
    BookingNotFound,
    Forbidden,
    InvalidDateRange,
    InvalidPaymentMethod,
    InvalidRequest,
    InvalidStatus,
    InvalidTransition,
    NoRefundablePayment,
    PolicyUndefined,
    RefundDenied,
    RoomMissingForBooking,
    RoomNotFound,
    RoomUnavailable,
    StayTooLong,
    Unauthorized,
)
from app.core.logging_config import get_logger
from app.core.redis import delete_cache, hotel_rooms_key
from app.db.session import unit_of_work
from app.models.booking import Booking
from app.models.enums import BookingStatus, LogType, PaymentMethod, PaymentStatus, Role
from app.models.payment import Payment
from app.models.room import Room, RoomUnavailablePeriod
from app.models.user import User
from app.tasks.payment_tasks import schedule_payment_timeout
from app.utils.audit import record_audit
from app.utils.availability import find_booking_interval, is_available
from app.utils.membership import resolve_tier
from app.utils.notifications import send_refund_notice
from app.utils.pricing import (
    calculate_booking_price,
    calculate_loyalty_points,
    count_nights,
    exceeds_nightly_cap,
)
from app.utils.refund import calculate_refund

logger = get_logger()


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELED, BookingStatus.CHECKED_IN},
    BookingStatus.CHECKED_IN: {BookingStatus.COMPLETED, BookingStatus.CANCELED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELED: set(),
}

ADMIN_REVERSIONS = {
    BookingStatus.CONFIRMED: {BookingStatus.PENDING},
}

TERMINAL_STATUSES = {BookingStatus.COMPLETED, BookingStatus.CANCELED}

CANCELABLE_STATUSES = {BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN}

# Payments still awaiting money follow the booking's price
OPEN_PAYMENT_STATUSES = {PaymentStatus.UNPAID, PaymentStatus.PENDING}

# Who may request each target status
TRANSITION_ROLES = {
    BookingStatus.PENDING: {Role.ADMIN},
    BookingStatus.CANCELED: {Role.USER, Role.HOTEL_MANAGER, Role.ADMIN},
    BookingStatus.CONFIRMED: {Role.HOTEL_MANAGER, Role.ADMIN},
    BookingStatus.CHECKED_IN: {Role.HOTEL_MANAGER, Role.ADMIN},
    BookingStatus.COMPLETED: {Role.HOTEL_MANAGER, Role.ADMIN},
}

DATE_CHANGE_ROLES = {Role.USER, Role.HOTEL_MANAGER, Role.ADMIN}

BOOKING_ROLES = {Role.USER, Role.ADMIN}


# ---------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------
def is_participant(booking: Booking, user: User) -> bool:
    if user.role == Role.ADMIN:
        return True
    if user.role == Role.HOTEL_MANAGER:
        return user.responsible_hotel_id is not None and user.responsible_hotel_id == booking.hotel_id
    if user.role == Role.USER:
        return booking.user_id == user.id
    raise ValueError(f"Unhandled role {user.role!r}")


def parse_booking_status(value: str) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise InvalidStatus(f"Invalid booking status. Allowed values: {allowed}.")


def parse_payment_method(value: str | None) -> PaymentMethod:
    if value is None:
        return PaymentMethod.CARD
    try:
        return PaymentMethod(value)
    except ValueError:
        raise InvalidPaymentMethod()


def check_stay(user: User, check_in: datetime, check_out: datetime) -> None:
    if check_out <= check_in:
        raise InvalidDateRange()
    if user.role != Role.ADMIN and exceeds_nightly_cap(check_in, check_out, config.MAX_NIGHTS):
        raise StayTooLong(f"User can only book up to {config.MAX_NIGHTS} nights.")


def load_booking(db: Session, booking_id: int, user: User, lock: bool = False) -> Booking:
    query = db.query(Booking).filter(Booking.id == booking_id)
    if lock:
        query = query.with_for_update()
    booking = query.first()

    if not booking:
        raise BookingNotFound(f"No booking with the id of {booking_id}")

    if not is_participant(booking, user):
        raise Unauthorized(f"User {user.id} is not authorized to access this booking")

    return booking


def lock_room(db: Session, room_id: int) -> Room | None:
    return db.query(Room).filter(Room.id == room_id).with_for_update().first()


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
def create_booking(
    db: Session,
    room_id: int,
    user: User,
    check_in: datetime,
    check_out: datetime,
    method: str | None = None,
) -> tuple[Booking, Payment]:
    if user.role not in BOOKING_ROLES:
        raise Forbidden(f"User role {user.role.value} cannot create bookings")

    payment_method = parse_payment_method(method)
    check_stay(user, check_in, check_out)

    room = lock_room(db, room_id)
    if not room:
        raise RoomNotFound(f"No room with the id of {room_id}")

    if not is_available(room.unavailable_periods, check_in, check_out):
        raise RoomUnavailable()

    with unit_of_work(db, f"Create booking for room {room_id}", "booking"):
        booking = Booking(
            user_id=user.id,
            room_id=room.id,
            hotel_id=room.hotel_id,
            check_in_date=check_in,
            check_out_date=check_out,
            status=BookingStatus.PENDING,
            tier_at_booking=user.membership_tier,
        )
        db.add(booking)
        db.flush()

        room.unavailable_periods.append(
            RoomUnavailablePeriod(booking_id=booking.id, start_date=check_in, end_date=check_out)
        )

        payment = Payment(
            booking_id=booking.id,
            user_id=user.id,
            amount=calculate_booking_price(room, check_in, check_out),
            status=PaymentStatus.UNPAID,
            method=payment_method,
        )
        db.add(payment)

    db.refresh(booking)
    db.refresh(payment)
    delete_cache(hotel_rooms_key(booking.hotel_id))

    logger.bind(log_type="booking").info(
        f"Booking Created | Booking={booking.id} | User={user.id} | Room={room_id} | "
        f"{check_in:%Y-%m-%d %H:%M} -> {check_out:%Y-%m-%d %H:%M}"
    )

    schedule_payment_timeout(payment.id)
    record_audit(user.id, LogType.PAYMENT, f"Payment {payment.id} of {payment.amount} opened for booking {booking.id}")

    return booking, payment


# ---------------------------------------------------------------------
# READ
# ---------------------------------------------------------------------
def list_bookings(db: Session, user: User, hotel_id: int | None = None) -> list[Booking]:
    query = db.query(Booking)

    if user.role == Role.USER:
        query = query.filter(Booking.user_id == user.id)
    elif user.role == Role.HOTEL_MANAGER:
        query = query.filter(Booking.hotel_id == user.responsible_hotel_id)
    elif hotel_id is not None:
        query = query.filter(Booking.hotel_id == hotel_id)

    return query.order_by(Booking.check_in_date.desc()).all()


def get_booking(db: Session, booking_id: int, user: User) -> Booking:
    return load_booking(db, booking_id, user)


# ---------------------------------------------------------------------
# UPDATE (status XOR dates)
# ---------------------------------------------------------------------
def update_booking(
    db: Session,
    booking_id: int,
    user: User,
    status: str | None = None,
    check_in: datetime | None = None,
    check_out: datetime | None = None,
    now: datetime | None = None,
) -> Booking:
    booking = load_booking(db, booking_id, user, lock=True)

    has_dates = check_in is not None or check_out is not None

    if status is not None and has_dates:
        field = "checkInDate" if check_in is not None else "checkOutDate"
        raise InvalidRequest(f"Cannot update 'status' together with '{field}' in the same request.")

    if status is not None:
        return change_status(db, booking, user, parse_booking_status(status), now=now)

    if has_dates:
        return change_dates(db, booking, user, check_in, check_out)

    raise InvalidRequest("Nothing to update. Provide either a status or new dates.")


def update_booking_status(db: Session, booking_id: int, user: User, status: str, now: datetime | None = None) -> Booking:
    return update_booking(db, booking_id, user, status=status, now=now)


def update_booking_dates(
    db: Session,
    booking_id: int,
    user: User,
    check_in: datetime | None = None,
    check_out: datetime | None = None,
) -> Booking:
    return update_booking(db, booking_id, user, check_in=check_in, check_out=check_out)


def cancel_booking(db: Session, booking_id: int, user: User, now: datetime | None = None) -> Booking:
    return update_booking(db, booking_id, user, status=BookingStatus.CANCELED.value, now=now)


def change_status(db: Session, booking: Booking, user: User, target: BookingStatus, now: datetime | None = None) -> Booking:
    if user.role not in TRANSITION_ROLES[target]:
        raise Forbidden(f"User role {user.role.value} cannot set booking status to '{target.value}'")

    if target == BookingStatus.CANCELED:
        return _cancel(db, booking, now or datetime.utcnow())

    allowed = set(ALLOWED_TRANSITIONS[booking.status])
    if user.role == Role.ADMIN:
        allowed |= ADMIN_REVERSIONS.get(booking.status, set())

    if target not in allowed:
        raise InvalidTransition(
            f"Booking cannot move from '{booking.status.value}' to '{target.value}'."
        )

    if target == BookingStatus.COMPLETED:
        return _complete(db, booking)

    previous = booking.status
    with unit_of_work(db, f"Booking {booking.id} -> {target.value}", "booking"):
        booking.status = target

    logger.bind(log_type="booking").info(
        f"Booking {booking.id} status {previous.value} -> {target.value} by User={user.id}"
    )
    return booking


# ---------------------------------------------------------------------
# CANCELLATION + REFUND
# ---------------------------------------------------------------------
def _cancel(db: Session, booking: Booking, now: datetime) -> Booking:
    if booking.status not in CANCELABLE_STATUSES:
        raise BookingNotCancelable()

    payment = (
        db.query(Payment)
        .filter(Payment.booking_id == booking.id, Payment.status == PaymentStatus.COMPLETED)
        .with_for_update()
        .first()
    )
    if not payment:
        raise NoRefundablePayment()

    try:
        refund = calculate_refund(booking.check_in_date, booking.check_out_date, now, payment.amount)
    except PolicyUndefined as e:
        raise RefundDenied(f"Refund failed. {e.message}")

    if refund <= 0:
        raise RefundDenied()

    room = lock_room(db, booking.room_id)
    if not room:
        raise RoomMissingForBooking()

    with unit_of_work(db, f"Cancel booking {booking.id}", "refund"):
        booking.status = BookingStatus.CANCELED

        payment.status = PaymentStatus.CANCELED
        payment.canceled_at = now

        db.query(User).filter(User.id == booking.user_id).update(
            {User.credit: User.credit + refund}, synchronize_session=False
        )

        held = find_booking_interval(
            room.unavailable_periods, booking.id, booking.check_in_date, booking.check_out_date
        )
        if held is not None:
            room.unavailable_periods.remove(held)
        else:
            logger.bind(log_type="booking").warning(
                f"Booking {booking.id} had no reserved period on Room={room.id}"
            )

    delete_cache(hotel_rooms_key(booking.hotel_id))

    owner = booking.user
    logger.bind(log_type="refund").info(
        f"Refund | Booking={booking.id} | User={owner.id} | Payment={payment.id} | Amount={refund:.2f}"
    )
    record_audit(owner.id, LogType.REFUND, f"Refunded {refund:.2f} to credit for booking {booking.id}")
    send_refund_notice(owner.email, owner.name, booking.id, refund)

    return booking


# ---------------------------------------------------------------------
# COMPLETION + MEMBERSHIP
# ---------------------------------------------------------------------
def _complete(db: Session, booking: Booking) -> Booking:
    room = db.query(Room).filter(Room.id == booking.room_id).first()
    if not room:
        raise RoomMissingForBooking()

    earned = calculate_loyalty_points(room, booking.check_in_date, booking.check_out_date)
    owner = booking.user
    previous_tier = owner.membership_tier

    with unit_of_work(db, f"Complete booking {booking.id}", "membership"):
        booking.status = BookingStatus.COMPLETED

        db.query(User).filter(User.id == owner.id).update(
            {User.membership_points: User.membership_points + earned}, synchronize_session=False
        )
        points = db.query(User.membership_points).filter(User.id == owner.id).scalar()

        new_tier = resolve_tier(points)
        if new_tier != previous_tier:
            owner.membership_tier = new_tier

    logger.bind(log_type="membership").info(
        f"Booking {booking.id} completed | User={owner.id} | +{earned:g} points -> {points:g}"
    )

    if new_tier != previous_tier:
        record_audit(
            owner.id,
            LogType.MEMBERSHIP,
            f"Membership tier changed from {previous_tier.value} to {new_tier.value} ({points:g} points)",
        )

    return booking


# ---------------------------------------------------------------------
# DATE CHANGE
# ---------------------------------------------------------------------
def change_dates(
    db: Session,
    booking: Booking,
    user: User,
    check_in: datetime | None,
    check_out: datetime | None,
) -> Booking:
    if user.role not in DATE_CHANGE_ROLES:
        raise Forbidden(f"User role {user.role.value} cannot change booking dates")

    if booking.status in TERMINAL_STATUSES:
        raise InvalidRequest(f"Dates of a {booking.status.value} booking cannot be changed.")

    new_check_in = check_in or booking.check_in_date
    new_check_out = check_out or booking.check_out_date
    check_stay(user, new_check_in, new_check_out)

    room = lock_room(db, booking.room_id)
    if not room:
        raise RoomMissingForBooking()

    payments = (
        db.query(Payment)
        .filter(Payment.booking_id == booking.id)
        .with_for_update()
        .all()
    )

    # A completed payment is never re-priced
    paid = any(p.status == PaymentStatus.COMPLETED for p in payments)
    if paid and count_nights(new_check_in, new_check_out) > count_nights(booking.check_in_date, booking.check_out_date):
        raise InvalidRequest("A paid booking cannot be extended. Cancel it and book the new dates instead.")

    held = find_booking_interval(
        room.unavailable_periods, booking.id, booking.check_in_date, booking.check_out_date
    )
    others = [period for period in room.unavailable_periods if period is not held]
    if not is_available(others, new_check_in, new_check_out):
        raise RoomUnavailable()

    with unit_of_work(db, f"Change dates of booking {booking.id}", "booking"):
        if held is not None:
            room.unavailable_periods.remove(held)
        room.unavailable_periods.append(
            RoomUnavailablePeriod(booking_id=booking.id, start_date=new_check_in, end_date=new_check_out)
        )

        booking.check_in_date = new_check_in
        booking.check_out_date = new_check_out

        for payment in payments:
            if payment.status in OPEN_PAYMENT_STATUSES:
                payment.amount = calculate_booking_price(room, new_check_in, new_check_out)

    delete_cache(hotel_rooms_key(booking.hotel_id))

    logger.bind(log_type="booking").info(
        f"Booking {booking.id} dates changed by User={user.id} -> "
        f"{new_check_in:%Y-%m-%d %H:%M} / {new_check_out:%Y-%m-%d %H:%M}"
    )
    return booking


# ---------------------------------------------------------------------
# DELETE (admin)
# ---------------------------------------------------------------------
def delete_booking(db: Session, booking_id: int, user: User) -> None:
    if user.role != Role.ADMIN:
        raise Forbidden("Only admins can delete bookings")

    booking = load_booking(db, booking_id, user, lock=True)
    room = lock_room(db, booking.room_id)
    hotel_id = booking.hotel_id

    with unit_of_work(db, f"Delete booking {booking_id}", "booking"):
        deleted_payments = (
            db.query(Payment).filter(Payment.booking_id == booking.id).delete(synchronize_session=False)
        )

        if room is not None:
            held = find_booking_interval(
                room.unavailable_periods, booking.id, booking.check_in_date, booking.check_out_date
            )
            if held is not None:
                room.unavailable_periods.remove(held)

        db.delete(booking)

    delete_cache(hotel_rooms_key(hotel_id))

    logger.bind(log_type="booking").info(
        f"Booking {booking_id} deleted by admin {user.id} with {deleted_payments} payment(s)"
    )
