import math
from datetime import timedelta

ONE_NIGHT = timedelta(days=1)


def count_nights(check_in, check_out) -> int:
    """Nights charged for a stay; a partial night counts as a full one."""
    return math.ceil((check_out - check_in) / ONE_NIGHT)


def exceeds_nightly_cap(check_in, check_out, max_nights: int) -> bool:
    return check_out - check_in > max_nights * ONE_NIGHT


def calculate_booking_price(room, check_in, check_out):
    total = room.price * count_nights(check_in, check_out)
    return round(total, 2)


def calculate_loyalty_points(room, check_in, check_out):
    # 1 point per 100 of nightly price, per night
    return room.price / 100 * count_nights(check_in, check_out)
