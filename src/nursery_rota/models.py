"""
Pydantic models for the rota validation engine
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Annotated, List, Literal, Mapping, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from .utils.exceptions import ConfigurationError
from .utils.helpers import (
    MINUTES_PER_DAY,
    ceil_div,
    format_time_range,
    generate_hash,
    minutes_to_hours,
)


class Day(IntEnum):
    """Day of week as stored in the shifts table (0=Sunday, 6=Saturday)"""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def parse(cls, value: Union[int, str]) -> "Day":
        """Parse a day from its index or English name (case-insensitive)"""
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped.isdigit():
                try:
                    return cls[stripped.upper()]
                except KeyError:
                    raise ValueError(f"Invalid day: {value!r}") from None
            value = int(stripped)
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid day of the week: {value!r}") from None

    def __str__(self) -> str:
        return self.name.capitalize()


class AgeBand(str, Enum):
    UNDER_TWO = "under_two"
    TWO_YEAR_OLD = "two_year_old"
    THREE_PLUS = "three_plus"


class RejectionReason(str, Enum):
    INVALID_INTERVAL = "invalid_interval"
    UNKNOWN_MEMBER = "unknown_member"


# Members
class Staff(BaseModel):
    """A staff member counted towards ratio coverage"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    kind: Literal["staff"] = "staff"
    member_id: UUID
    project_id: Optional[UUID] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class Child(BaseModel):
    """A child whose age band determines the staff they require"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    kind: Literal["child"] = "child"
    member_id: UUID
    project_id: Optional[UUID] = None
    age_band: AgeBand
    name: Optional[str] = Field(None, min_length=1, max_length=255)


Member = Annotated[Union[Staff, Child], Field(discriminator="kind")]
member_adapter: TypeAdapter = TypeAdapter(Member)


# Shifts and intervals
class ShiftRow(BaseModel):
    """One persisted row of the shifts table.

    Bounds are deliberately unchecked here: the store does not enforce
    in_time < out_time, so malformed rows must survive until normalization
    where they are rejected and reported.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    member_id: UUID
    day: int
    in_time: int
    out_time: int

    @property
    def length(self) -> int:
        """Shift length in minutes"""
        return self.out_time - self.in_time

    @property
    def length_hours(self) -> Tuple[int, int]:
        """Shift length as (hours, minutes)"""
        return minutes_to_hours(self.length)


class TimeInterval(BaseModel):
    """Half-open [start, end) minute range on a single day"""
    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=0, le=6)
    start: int = Field(..., ge=0, lt=MINUTES_PER_DAY)
    end: int = Field(..., gt=0, le=MINUTES_PER_DAY)

    @model_validator(mode="after")
    def end_after_start(self) -> "TimeInterval":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self

    @property
    def duration(self) -> int:
        return self.end - self.start

    def contains(self, minute: int) -> bool:
        """Check if a minute falls inside the interval"""
        return self.start <= minute < self.end

    def contains_interval(self, other: "TimeInterval") -> bool:
        """Check if another interval lies entirely within this one"""
        return self.day == other.day and self.start <= other.start and other.end <= self.end

    def to_time_string(self) -> str:
        return f"{Day(self.day)} {format_time_range(self.start, self.end)}"


class TaggedInterval(BaseModel):
    """Interval tagged with the shift and member it came from"""
    model_config = ConfigDict(frozen=True)

    shift_id: UUID
    member_id: UUID
    interval: TimeInterval

    @property
    def day(self) -> int:
        return self.interval.day

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end


class ShiftEdit(BaseModel):
    """A single shift insert (before=None), delete (after=None) or update"""
    model_config = ConfigDict(frozen=True)

    before: Optional[ShiftRow] = None
    after: Optional[ShiftRow] = None

    @model_validator(mode="after")
    def validate_edit(self) -> "ShiftEdit":
        if self.before is None and self.after is None:
            raise ValueError("A shift edit needs a before or an after row")
        if self.before is not None and self.after is not None and self.before.id != self.after.id:
            raise ValueError("before and after must describe the same shift")
        return self

    @property
    def shift_id(self) -> UUID:
        return (self.after or self.before).id

    @property
    def rows(self) -> List[ShiftRow]:
        return [row for row in (self.before, self.after) if row is not None]


# Ratio rules
class RatioRules(BaseModel):
    """Children per staff member, keyed by age band (3 means 1:3)"""
    model_config = ConfigDict(frozen=True)

    ratios: Mapping[AgeBand, int]

    @field_validator("ratios")
    @classmethod
    def validate_ratios(cls, v):
        for age_band, ratio in v.items():
            if ratio <= 0:
                raise ValueError(f"Ratio for {age_band.value} must be positive")
        return dict(v)

    def ratio_for(self, age_band: AgeBand) -> int:
        try:
            return self.ratios[age_band]
        except KeyError:
            raise ConfigurationError(
                f"No ratio rule configured for age band {age_band.value}",
                config_key="ratios",
                actual_value=age_band.value,
            ) from None

    def required_staff(self, composition: Mapping[AgeBand, int]) -> int:
        """Staff needed for a mix of children; each band rounds up on its own"""
        return sum(
            ceil_div(count, self.ratio_for(age_band))
            for age_band, count in composition.items()
            if count > 0
        )

    def describe(self) -> str:
        return ", ".join(
            f"{age_band.value} 1:{self.ratios[age_band]}"
            for age_band in AgeBand
            if age_band in self.ratios
        )


# Findings
class ConflictFinding(BaseModel):
    """Two shifts of the same member overlapping on one day"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["conflict"] = "conflict"
    member_id: UUID
    day: int
    shift_id: UUID
    other_shift_id: UUID
    start: int
    end: int


class RatioViolation(BaseModel):
    """Maximal window of a day where present staff fall short of the ratio.

    Over a merged window the worst values are kept: the highest requirement,
    the lowest staff count and the largest number of children.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["ratio_violation"] = "ratio_violation"
    day: int
    start: int
    end: int
    required_staff: int
    actual_staff: int
    child_count: int

    @property
    def shortfall(self) -> int:
        return self.required_staff - self.actual_staff


Finding = Annotated[Union[ConflictFinding, RatioViolation], Field(discriminator="kind")]


class ShiftRejection(BaseModel):
    """A shift excluded at ingestion, reported alongside the findings"""
    model_config = ConfigDict(frozen=True)

    shift_id: UUID
    member_id: UUID
    day: int
    in_time: int
    out_time: int
    reason: RejectionReason
    message: str

    @classmethod
    def for_row(cls, row: ShiftRow, reason: RejectionReason, message: str) -> "ShiftRejection":
        return cls(
            shift_id=row.id,
            member_id=row.member_id,
            day=row.day,
            in_time=row.in_time,
            out_time=row.out_time,
            reason=reason,
            message=message,
        )


class ValidationReport(BaseModel):
    findings: List[Finding] = Field(default_factory=list)
    rejections: List[ShiftRejection] = Field(default_factory=list)

    @property
    def conflicts(self) -> List[ConflictFinding]:
        return [f for f in self.findings if isinstance(f, ConflictFinding)]

    @property
    def ratio_violations(self) -> List[RatioViolation]:
        return [f for f in self.findings if isinstance(f, RatioViolation)]

    @property
    def is_valid(self) -> bool:
        return not self.findings and not self.rejections

    def summary(self) -> dict:
        return {
            "conflicts": len(self.conflicts),
            "ratio_violations": len(self.ratio_violations),
            "rejections": len(self.rejections),
        }

    def fingerprint(self) -> str:
        """Stable hash of the report content"""
        return generate_hash(self.model_dump(mode="json"))
