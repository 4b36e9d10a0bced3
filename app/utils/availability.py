"""
Unavailable-interval bookkeeping for a room.

Works on any sequence of objects exposing ``start_date`` / ``end_date`` (and
optionally ``booking_id``): ORM ``RoomUnavailablePeriod`` rows or plain
``Interval`` tuples. Functions that "modify" return a new list.

Overlap is half-open: ``[a, b)`` and ``[b, c)`` touch but do not overlap, so a
check-out and the next check-in may fall on the same instant.
"""

from datetime import datetime
from typing import NamedTuple, Optional, Sequence


class Interval(NamedTuple):
    start_date: datetime
    end_date: datetime
    booking_id: Optional[int] = None


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    return start < other_end and end > other_start


def is_available(intervals: Sequence, start: datetime, end: datetime) -> bool:
    for interval in intervals:
        if overlaps(start, end, interval.start_date, interval.end_date):
            return False
    return True


def find_conflict(intervals: Sequence) -> Optional[tuple]:
    """First pair of overlapping intervals, or None."""
    ordered = sorted(intervals, key=lambda i: i.start_date)
    for previous, current in zip(ordered, ordered[1:]):
        if overlaps(previous.start_date, previous.end_date, current.start_date, current.end_date):
            return previous, current
    return None


def reserve(intervals: Sequence, start: datetime, end: datetime, booking_id: Optional[int] = None) -> list:
    return list(intervals) + [Interval(start, end, booking_id)]


def release(intervals: Sequence, start: datetime, end: datetime) -> list:
    """Drop the first interval with exactly these bounds; unchanged if there is none."""
    remaining = list(intervals)
    for index, interval in enumerate(remaining):
        if interval.start_date == start and interval.end_date == end:
            del remaining[index]
            break
    return remaining


def find_booking_interval(intervals: Sequence, booking_id: int, start: datetime, end: datetime):
    """
    The interval held by ``booking_id``.

    Periods recorded without an owner are matched on their exact bounds.
    """
    for interval in intervals:
        if getattr(interval, "booking_id", None) == booking_id:
            return interval

    for interval in intervals:
        if getattr(interval, "booking_id", None) is None and interval.start_date == start and interval.end_date == end:
            return interval

    return None
