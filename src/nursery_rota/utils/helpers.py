"""
Helper functions for the rota validation engine
"""
import hashlib
import json
from typing import Any, Tuple

MINUTES_PER_DAY = 24 * 60


def generate_hash(data: Any) -> str:
    """Generate SHA-256 hash of data for comparison"""
    if isinstance(data, (dict, list)):
        json_str = json.dumps(data, sort_keys=True, default=str)
    else:
        json_str = str(data)

    return hashlib.sha256(json_str.encode()).hexdigest()


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer division rounding up"""
    return -(-numerator // denominator)


def minutes_to_time_string(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM (1440 renders as 24:00)"""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def time_string_to_minutes(time_str: str) -> int:
    """Convert HH:MM string to minutes from start of day"""
    try:
        hours, minutes = map(int, time_str.strip().split(":"))
    except ValueError as e:
        raise ValueError(f"Invalid time string: {time_str!r}") from e

    if not 0 <= minutes < 60 or not 0 <= hours <= 24:
        raise ValueError(f"Invalid time string: {time_str!r}")

    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        raise ValueError(f"Time beyond end of day: {time_str!r}")
    return total


def minutes_to_hours(minutes: int) -> Tuple[int, int]:
    """Split a minute count into (hours, minutes)"""
    return divmod(minutes, 60)


def format_time_range(start: int, end: int) -> str:
    """Format a minute range as HH:MM-HH:MM"""
    return f"{minutes_to_time_string(start)}-{minutes_to_time_string(end)}"
