"""
Day/minute interval arithmetic for shift validation
"""
from typing import Optional, Union

from ..models import Day, TimeInterval
from ..utils.exceptions import InvalidInterval
from ..utils.helpers import MINUTES_PER_DAY, time_string_to_minutes


def normalize(day: int, in_time: int, out_time: int) -> TimeInterval:
    """Turn raw shift bounds into a half-open interval.

    Raises InvalidInterval when the day is not 0-6, either bound lies outside
    [0, 1440], or the shift does not end after it starts.
    """
    def invalid(message: str) -> InvalidInterval:
        return InvalidInterval(message, day=day, in_time=in_time, out_time=out_time)

    if not 0 <= day <= 6:
        raise invalid(f"Invalid day of the week: {day}")
    for minute in (in_time, out_time):
        if minute < 0:
            raise invalid(f"Minute cannot be before midnight: {minute}")
        if minute > MINUTES_PER_DAY:
            raise invalid(f"Minute cannot be after midnight: {minute}")
    if in_time >= out_time:
        raise invalid(f"Start time must be before end time: {in_time} >= {out_time}")

    return TimeInterval(day=day, start=in_time, end=out_time)


def normalize_time_strings(day: Union[int, str], start: str, end: str) -> TimeInterval:
    """normalize() for a day name or index and HH:MM bounds"""
    try:
        day_index = int(Day.parse(day))
        in_time = time_string_to_minutes(start)
        out_time = time_string_to_minutes(end)
    except ValueError as e:
        raise InvalidInterval(str(e)) from e
    return normalize(day_index, in_time, out_time)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Check if two intervals overlap; touching endpoints do not"""
    return a.day == b.day and a.start < b.end and b.start < a.end


def overlap_window(a: TimeInterval, b: TimeInterval) -> Optional[TimeInterval]:
    """Shared part of two intervals, or None when they do not overlap"""
    if not overlaps(a, b):
        return None
    return TimeInterval(day=a.day, start=max(a.start, b.start), end=min(a.end, b.end))
