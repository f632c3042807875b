"""
Core validation logic for the nursery rota engine

- Time model: interval normalization and overlap predicates
- Conflict detection: overlapping shifts per member and day
- Ratio validation: staff-to-child coverage over a day's timeline
- Rota assembly: deterministic reports and incremental revalidation
"""

from .assembler import RotaAssembler, finding_sort_key
from .conflicts import ConflictDetector, find_conflicts
from .ratios import RatioValidator, validate_ratios
from .time_model import normalize, normalize_time_strings, overlap_window, overlaps

__all__ = [
    "RotaAssembler",
    "ConflictDetector",
    "RatioValidator",
    "find_conflicts",
    "finding_sort_key",
    "normalize",
    "normalize_time_strings",
    "overlap_window",
    "overlaps",
    "validate_ratios",
]
