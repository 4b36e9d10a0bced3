from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from app.utils.pricing import calculate_booking_price, calculate_loyalty_points, count_nights, exceeds_nightly_cap

CHECK_IN = datetime(2025, 4, 25, 14)


def test_partial_night_is_charged_as_full():
    assert count_nights(CHECK_IN, CHECK_IN + timedelta(days=1)) == 1
    assert count_nights(CHECK_IN, CHECK_IN + timedelta(days=1, hours=2)) == 2


def test_booking_price_is_price_times_nights():
    room = SimpleNamespace(price=1234.5)
    assert calculate_booking_price(room, CHECK_IN, CHECK_IN + timedelta(days=3)) == pytest.approx(3703.5)


def test_loyalty_points_one_per_hundred_per_night():
    room = SimpleNamespace(price=5000)
    assert calculate_loyalty_points(room, CHECK_IN, CHECK_IN + timedelta(days=1)) == 50
    assert calculate_loyalty_points(room, CHECK_IN, CHECK_IN + timedelta(days=2)) == 100


def test_nightly_cap():
    assert not exceeds_nightly_cap(CHECK_IN, CHECK_IN + timedelta(days=3), 3)
    assert exceeds_nightly_cap(CHECK_IN, CHECK_IN + timedelta(days=3, minutes=1), 3)
