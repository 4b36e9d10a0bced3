from datetime import datetime
from unittest.mock import MagicMock

import pytest
from kombu.exceptions import OperationalError

from app.models.enums import BookingStatus, LogType, PaymentStatus
from app.models.log import Log
from app.tasks import payment_tasks
from app.tasks.payment_tasks import expire_unpaid_payment, schedule_payment_timeout

CHECK_IN = datetime(2030, 4, 25)
CHECK_OUT = datetime(2030, 4, 26)


def test_unpaid_payment_fails_on_timeout(db, room, guest, make_booking, side_effects):
    _, payment = make_booking(
        guest, room, CHECK_IN, CHECK_OUT, status=BookingStatus.PENDING, payment_status=PaymentStatus.UNPAID
    )

    assert expire_unpaid_payment(payment.id) is True

    db.refresh(payment)
    assert payment.status == PaymentStatus.FAILED
    assert db.query(Log).filter(Log.type == LogType.PAYMENT, Log.user_id == guest.id).count() == 1
    side_effects.task_notice.assert_called_once_with(guest.email, guest.name, payment.booking_id, "failed")


@pytest.mark.parametrize("status", [PaymentStatus.PENDING, PaymentStatus.COMPLETED, PaymentStatus.CANCELED])
def test_timeout_leaves_settled_payments_alone(db, room, guest, make_booking, side_effects, status):
    _, payment = make_booking(guest, room, CHECK_IN, CHECK_OUT, payment_status=status)

    assert expire_unpaid_payment(payment.id) is False

    db.refresh(payment)
    assert payment.status == status
    side_effects.task_notice.assert_not_called()


def test_timeout_for_deleted_payment_is_a_no_op(db):
    assert expire_unpaid_payment(12345) is False


def test_schedule_uses_configured_countdown(monkeypatch):
    apply_async = MagicMock()
    monkeypatch.setattr(payment_tasks.expire_unpaid_payment, "apply_async", apply_async)

    schedule_payment_timeout(7)
    schedule_payment_timeout(8, timeout=5)

    assert apply_async.call_args_list[0].kwargs == {
        "args": [7], "countdown": payment_tasks.PAYMENT_TIMEOUT_SECONDS, "retry": False,
    }
    assert apply_async.call_args_list[1].kwargs["countdown"] == 5


def test_schedule_survives_broker_outage(monkeypatch):
    monkeypatch.setattr(
        payment_tasks.expire_unpaid_payment,
        "apply_async",
        MagicMock(side_effect=OperationalError("broker unreachable")),
    )

    schedule_payment_timeout(7)
