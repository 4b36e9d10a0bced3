"""
Payment timeout watchdog.

A payment opened with a booking must leave ``unpaid`` within
``PAYMENT_TIMEOUT_SECONDS``; otherwise it is marked ``failed``. Nothing
cancels the timer: the task re-reads the payment when it fires and does
nothing unless it is still unpaid.
"""

from kombu.exceptions import OperationalError
from sqlalchemy.exc import SQLAlchemyError

from app.db import base  # noqa: F401
from app.core.config import PAYMENT_TIMEOUT_SECONDS
from app.core.logging_config import get_logger
from app.db.session import SessionLocal
from app.models.enums import PaymentStatus, LogType
from app.models.payment import Payment
from app.tasks.celery_app import celery_app
from app.utils.audit import record_audit
from app.utils.notifications import send_payment_status_notice

logger = get_logger()


@celery_app.task(name="payments.expire_unpaid_payment")
def expire_unpaid_payment(payment_id: int) -> bool:
    """Mark the payment failed if it is still unpaid. Returns True when it did."""
    db = SessionLocal()
    try:
        payment = db.query(Payment).filter(Payment.id == payment_id).with_for_update().first()

        if not payment or payment.status != PaymentStatus.UNPAID:
            db.rollback()
            return False

        payment.status = PaymentStatus.FAILED
        db.commit()

        logger.bind(log_type="payment").info(
            f"Payment {payment_id} status updated to 'failed' due to timeout"
        )

        user_id, email, name = payment.user.id, payment.user.email, payment.user.name
        booking_id = payment.booking_id
    except SQLAlchemyError as e:
        db.rollback()
        logger.bind(log_type="payment").error(f"Failed to expire payment {payment_id} -> {e}")
        raise
    finally:
        db.close()

    record_audit(user_id, LogType.PAYMENT, f"Payment {payment_id} failed: not paid in time")
    send_payment_status_notice(email, name, booking_id, PaymentStatus.FAILED.value)
    return True


def schedule_payment_timeout(payment_id: int, timeout: int | None = None) -> None:
    countdown = PAYMENT_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        expire_unpaid_payment.apply_async(args=[payment_id], countdown=countdown, retry=False)
    except OperationalError as e:
        # Booking is already committed; the payment stays unpaid until handled manually
        logger.bind(log_type="payment").error(
            f"Could not schedule timeout for payment {payment_id} -> {e}"
        )
        return

    logger.bind(log_type="payment").info(
        f"Payment {payment_id} timeout scheduled in {countdown}s"
    )
