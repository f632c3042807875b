"""
Nursery Rota Engine

Shift conflict detection and staff-to-child ratio validation for a nursery
rota manager.

Features:
- Normalization of persisted shift rows into half-open day intervals
- Overlapping-shift detection per staff member and day
- Ratio compliance per age band over each day's timeline
- Deterministic validation reports with incremental revalidation
- Async shift store access over asyncpg

Example:
    Direct usage with the assembler:

    ```python
    from nursery_rota import RotaAssembler, ShiftSnapshot, settings

    snapshot = ShiftSnapshot(rows)
    report = RotaAssembler().assemble_snapshot(snapshot, members, settings.ratio_rules())
    ```

    Against the database:

    ```python
    from nursery_rota import DatabaseManager, RotaValidationService

    db = DatabaseManager()
    await db.initialize()
    report = await RotaValidationService().validate(db, project_id)
    ```
"""

__version__ = "1.0.0"

from .config import Settings, settings
from .core import (
    ConflictDetector,
    RatioValidator,
    RotaAssembler,
    find_conflicts,
    normalize,
    overlaps,
    validate_ratios,
)
from .database import DatabaseManager, ShiftSnapshot, ShiftStoreAdapter
from .models import (
    AgeBand,
    Child,
    ConflictFinding,
    Day,
    Member,
    RatioRules,
    RatioViolation,
    RejectionReason,
    ShiftEdit,
    ShiftRejection,
    ShiftRow,
    Staff,
    TaggedInterval,
    TimeInterval,
    ValidationReport,
)
from .service import RotaValidationService
from .utils.exceptions import ConfigurationError, InvalidInterval, RotaError, StorageUnavailable

__all__ = [
    "AgeBand",
    "Child",
    "ConfigurationError",
    "ConflictDetector",
    "ConflictFinding",
    "DatabaseManager",
    "Day",
    "InvalidInterval",
    "Member",
    "RatioRules",
    "RatioValidator",
    "RatioViolation",
    "RejectionReason",
    "RotaAssembler",
    "RotaError",
    "RotaValidationService",
    "Settings",
    "ShiftEdit",
    "ShiftRejection",
    "ShiftRow",
    "ShiftSnapshot",
    "ShiftStoreAdapter",
    "Staff",
    "StorageUnavailable",
    "TaggedInterval",
    "TimeInterval",
    "ValidationReport",
    "find_conflicts",
    "get_version",
    "normalize",
    "overlaps",
    "settings",
    "validate_ratios",
]


def get_version():
    """Get the package version."""
    return __version__
