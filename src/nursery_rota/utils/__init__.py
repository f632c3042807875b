"""
Utility functions and exceptions for the nursery rota engine
"""

from .exceptions import (
    FATAL_EXCEPTIONS,
    INGESTION_EXCEPTIONS,
    ConfigurationError,
    InvalidInterval,
    RotaError,
    StorageUnavailable,
)
from .helpers import (
    MINUTES_PER_DAY,
    ceil_div,
    format_time_range,
    generate_hash,
    minutes_to_hours,
    minutes_to_time_string,
    time_string_to_minutes,
)

__all__ = [
    "FATAL_EXCEPTIONS",
    "INGESTION_EXCEPTIONS",
    "MINUTES_PER_DAY",
    "ConfigurationError",
    "InvalidInterval",
    "RotaError",
    "StorageUnavailable",
    "ceil_div",
    "format_time_range",
    "generate_hash",
    "minutes_to_hours",
    "minutes_to_time_string",
    "time_string_to_minutes",
]
