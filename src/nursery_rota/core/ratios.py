"""
Staff-to-child ratio validation over a day's timeline
"""
import logging
from collections import Counter
from itertools import groupby
from typing import Hashable, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from ..models import AgeBand, RatioRules, RatioViolation, TaggedInterval

logger = logging.getLogger(__name__)

# End events sort before start events at the same minute so a handover
# never counts both the leaving and the arriving member.
END = 0
START = 1


class _Event(NamedTuple):
    minute: int
    order: int
    age_band: Optional[AgeBand]  # None for staff
    member_key: Hashable


class _Segment(NamedTuple):
    start: int
    end: int
    required: int
    actual: int
    children: int


class RatioValidator:
    """Flags windows where present staff cannot cover the children present"""

    def validate_ratios(
        self,
        day: int,
        staff_intervals: Iterable[TaggedInterval],
        child_intervals: Mapping[AgeBand, Iterable[TaggedInterval]],
        rules: RatioRules,
    ) -> List[RatioViolation]:
        """Sweep the day and return merged violation windows in time order.

        Intervals on other days are ignored. A member present through several
        overlapping shifts is counted once.
        """
        events = [
            event
            for tagged in staff_intervals
            if tagged.day == day
            for event in self._events(tagged, None)
        ]
        for age_band, intervals in child_intervals.items():
            events.extend(
                event
                for tagged in intervals
                if tagged.day == day
                for event in self._events(tagged, age_band)
            )
        events.sort(key=lambda e: (e.minute, e.order))

        staff_shifts: Counter = Counter()
        child_shifts: Counter = Counter()
        composition: Counter = Counter()

        timestamps = [
            (minute, list(group))
            for minute, group in groupby(events, key=lambda e: e.minute)
        ]
        segments: List[_Segment] = []

        for index, (minute, group) in enumerate(timestamps):
            for event in group:
                if event.age_band is None:
                    self._apply(staff_shifts, event)
                else:
                    if self._apply(child_shifts, event):
                        composition[event.age_band] += 1 if event.order == START else -1

            if index + 1 == len(timestamps):
                break

            required = rules.required_staff(composition)
            actual = sum(1 for count in staff_shifts.values() if count > 0)
            if actual < required:
                segments.append(_Segment(
                    start=minute,
                    end=timestamps[index + 1][0],
                    required=required,
                    actual=actual,
                    children=sum(composition.values()),
                ))

        violations = [
            RatioViolation(
                day=day,
                start=segment.start,
                end=segment.end,
                required_staff=segment.required,
                actual_staff=segment.actual,
                child_count=segment.children,
            )
            for segment in self._merge(segments)
        ]
        if violations:
            logger.debug(f"Day {day}: {len(violations)} ratio violation windows")
        return violations

    @staticmethod
    def _events(tagged: TaggedInterval, age_band: Optional[AgeBand]) -> Tuple[_Event, _Event]:
        return (
            _Event(tagged.start, START, age_band, tagged.member_id),
            _Event(tagged.end, END, age_band, tagged.member_id),
        )

    @staticmethod
    def _apply(active: Counter, event: _Event) -> bool:
        """Update a member's running shift count; True when presence flips"""
        key = (event.age_band, event.member_key)
        if event.order == START:
            active[key] += 1
            return active[key] == 1
        active[key] -= 1
        return active[key] == 0

    @staticmethod
    def _merge(segments: List[_Segment]) -> List[_Segment]:
        merged: List[_Segment] = []
        for segment in segments:
            if merged and merged[-1].end == segment.start:
                last = merged[-1]
                merged[-1] = _Segment(
                    start=last.start,
                    end=segment.end,
                    required=max(last.required, segment.required),
                    actual=min(last.actual, segment.actual),
                    children=max(last.children, segment.children),
                )
            else:
                merged.append(segment)
        return merged


def validate_ratios(
    day: int,
    staff_intervals: Iterable[TaggedInterval],
    child_intervals: Mapping[AgeBand, Iterable[TaggedInterval]],
    rules: RatioRules,
) -> List[RatioViolation]:
    return RatioValidator().validate_ratios(day, staff_intervals, child_intervals, rules)
