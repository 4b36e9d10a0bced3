from datetime import datetime, timedelta

from app.core.exceptions import PolicyUndefined

ONE_DAY = timedelta(days=1)


def refund_percent(check_in: datetime, check_out: datetime, cancel_at: datetime) -> float:
    """
    Fraction of the paid amount returned when a booking is canceled at ``cancel_at``.

    Before check-in: 90% when more than 3 days ahead, otherwise 50%.
    After check-out: nothing.
    During the stay the rule depends on the booked length (exactly 1, 2 or
    3 days) and on how long the guest has already stayed. Other lengths have
    no rule and raise PolicyUndefined.
    """
    if cancel_at < check_in:
        if check_in - cancel_at > 3 * ONE_DAY:
            return 0.90
        return 0.50

    if cancel_at > check_out:
        return 0.0

    stay = check_out - check_in
    elapsed = cancel_at - check_in

    if stay == ONE_DAY:
        return 0.0

    if stay == 2 * ONE_DAY:
        return 0.25 if elapsed < ONE_DAY else 0.0

    if stay == 3 * ONE_DAY:
        if elapsed < ONE_DAY:
            return 0.365
        if elapsed < 2 * ONE_DAY:
            return 0.12
        return 0.0

    raise PolicyUndefined(
        f"Refund policy has no rule for a stay of {stay.total_seconds() / ONE_DAY.total_seconds():g} days."
    )


def calculate_refund(check_in: datetime, check_out: datetime, cancel_at: datetime, paid_amount: float) -> float:
    """Refund amount for a cancellation; never negative, never above ``paid_amount``."""
    return refund_percent(check_in, check_out, cancel_at) * paid_amount
