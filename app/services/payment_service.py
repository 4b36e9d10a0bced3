from datetime import datetime

from sqlalchemy.orm import Session

from app.core.exceptions import (
    Forbidden,
    InvalidPaymentMethod,
    InvalidRequest,
    InvalidStatus,
    PaymentAlreadyCompleted,
    PaymentNotFound,
    Unauthorized,
)
from app.core.logging_config import get_logger
from app.db.session import unit_of_work
from app.models.booking import Booking
from app.models.enums import LogType, PaymentMethod, PaymentStatus, Role
from app.models.payment import Payment
from app.models.user import User
from app.utils.audit import record_audit
from app.utils.notifications import send_payment_status_notice

logger = get_logger()

# Statuses only staff may set
SETTLEMENT_STATUSES = {PaymentStatus.COMPLETED, PaymentStatus.FAILED}


def can_access_payment(payment: Payment, user: User) -> bool:
    if user.role == Role.ADMIN:
        return True
    if user.role == Role.HOTEL_MANAGER:
        return user.responsible_hotel_id is not None and payment.booking.hotel_id == user.responsible_hotel_id
    if user.role == Role.USER:
        return payment.user_id == user.id
    raise ValueError(f"Unhandled role {user.role!r}")


def load_payment(db: Session, payment_id: int, user: User, lock: bool = False) -> Payment:
    query = db.query(Payment).filter(Payment.id == payment_id)
    if lock:
        query = query.with_for_update()
    payment = query.first()

    if not payment:
        raise PaymentNotFound(f"Payment not found with the id of {payment_id}")

    if not can_access_payment(payment, user):
        raise Unauthorized(f"User {user.id} is not authorized to access this payment")

    return payment


def list_payments(db: Session, user: User) -> list[Payment]:
    query = db.query(Payment)

    if user.role == Role.USER:
        query = query.filter(Payment.user_id == user.id)
    elif user.role == Role.HOTEL_MANAGER:
        query = query.join(Booking).filter(Booking.hotel_id == user.responsible_hotel_id)

    return query.order_by(Payment.payment_date.desc()).all()


def get_payment(db: Session, payment_id: int, user: User) -> Payment:
    return load_payment(db, payment_id, user)


def parse_status(value: str) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in PaymentStatus)
        raise InvalidStatus(f"Invalid payment status. Allowed values: {allowed}.")


def check_status_change(user: User, current: PaymentStatus, status: PaymentStatus) -> None:
    if status == PaymentStatus.CANCELED:
        raise InvalidRequest("Cannot cancel a payment directly. Payment must be canceled through refunding the booking.")

    if status == PaymentStatus.UNPAID and user.role != Role.ADMIN:
        raise InvalidRequest("Cannot update the payment status to 'unpaid' as the user is not an admin.")

    if status in SETTLEMENT_STATUSES and user.role not in (Role.ADMIN, Role.HOTEL_MANAGER):
        raise Forbidden(f"You are not allowed to update the payment status to '{status.value}'")

    if current == PaymentStatus.COMPLETED and status != current and user.role != Role.ADMIN:
        raise InvalidRequest("A completed payment can only be reopened by an admin.")


# ---------------------------------------------------------------------
# UPDATE PAYMENT
# ---------------------------------------------------------------------
def update_payment(
    db: Session,
    payment_id: int,
    user: User,
    status: str | None = None,
    method: str | None = None,
) -> Payment:
    payment = load_payment(db, payment_id, user, lock=True)

    # Only a refund cancels a payment, and a refunded payment stays canceled
    if payment.status == PaymentStatus.CANCELED:
        raise InvalidRequest("Payment was canceled by a refund and can no longer be changed.")

    new_method = None
    if method is not None:
        try:
            new_method = PaymentMethod(method)
        except ValueError:
            raise InvalidPaymentMethod()

    new_status = None
    if status is not None:
        new_status = parse_status(status)
        check_status_change(user, payment.status, new_status)

    if new_status == PaymentStatus.COMPLETED:
        already_completed = (
            db.query(Payment.id)
            .filter(
                Payment.booking_id == payment.booking_id,
                Payment.status == PaymentStatus.COMPLETED,
                Payment.id != payment.id,
            )
            .first()
        )
        if already_completed:
            raise PaymentAlreadyCompleted()

    previous_status = payment.status

    with unit_of_work(db, f"Update payment {payment_id}", "payment"):
        if new_method is not None:
            payment.method = new_method
        if new_status is not None:
            payment.status = new_status
            if new_status == PaymentStatus.COMPLETED:
                payment.payment_date = datetime.utcnow()

    logger.bind(log_type="payment").info(
        f"Payment {payment.id} updated by User={user.id} | "
        f"status {previous_status.value} -> {payment.status.value} | method {payment.method.value}"
    )

    if new_status is not None and new_status != previous_status:
        payer = payment.user
        record_audit(
            payer.id,
            LogType.PAYMENT,
            f"Payment {payment.id} status changed from {previous_status.value} to {new_status.value}",
        )
        send_payment_status_notice(payer.email, payer.name, payment.booking_id, new_status.value)

    return payment
