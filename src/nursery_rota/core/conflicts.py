"""
Overlap detection for shifts of the same member
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple
from uuid import UUID

from ..models import ConflictFinding, TaggedInterval

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Finds overlapping shifts per member and day.

    Each (member, day) group is sorted by start time (ties by shift id) and
    swept once while tracking the shifts still running. A new shift is paired
    with every running shift, so all overlapping pairs are reported, not only
    the first one.
    """

    def find_conflicts(self, intervals: Iterable[TaggedInterval]) -> List[ConflictFinding]:
        groups: Dict[Tuple[UUID, int], List[TaggedInterval]] = defaultdict(list)
        for tagged in intervals:
            groups[(tagged.member_id, tagged.day)].append(tagged)

        conflicts = []
        for group in groups.values():
            conflicts.extend(self._sweep_group(group))

        conflicts.sort(key=lambda c: (c.day, c.start, c.member_id, c.shift_id, c.other_shift_id))
        logger.debug(f"Checked {len(groups)} member-days, found {len(conflicts)} conflicts")
        return conflicts

    def _sweep_group(self, group: List[TaggedInterval]) -> List[ConflictFinding]:
        ordered = sorted(group, key=lambda t: (t.start, t.shift_id))
        running: List[TaggedInterval] = []
        found = []

        for current in ordered:
            running = [t for t in running if t.end > current.start]
            for earlier in running:
                found.append(ConflictFinding(
                    member_id=current.member_id,
                    day=current.day,
                    shift_id=earlier.shift_id,
                    other_shift_id=current.shift_id,
                    start=current.start,
                    end=min(earlier.end, current.end),
                ))
            running.append(current)

        return found


def find_conflicts(intervals: Iterable[TaggedInterval]) -> List[ConflictFinding]:
    return ConflictDetector().find_conflicts(intervals)
