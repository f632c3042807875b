"""
Rota assembly: conflicts and ratio checks combined into one report
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Set, Tuple
from uuid import UUID

from ..models import (
    AgeBand,
    Child,
    ConflictFinding,
    Member,
    RatioRules,
    RejectionReason,
    ShiftEdit,
    ShiftRejection,
    TaggedInterval,
    ValidationReport,
)
from .conflicts import ConflictDetector
from .ratios import RatioValidator

if TYPE_CHECKING:
    from ..database.shift_store import ShiftSnapshot

logger = logging.getLogger(__name__)

FINDING_KIND_ORDER = {
    "conflict": 0,
    "ratio_violation": 1,
}


def finding_sort_key(finding) -> tuple:
    """Report order: day, start minute, finding kind, then identity"""
    if isinstance(finding, ConflictFinding):
        tail = (finding.member_id, finding.shift_id, finding.other_shift_id)
    else:
        tail = (finding.end,)
    return (finding.day, finding.start, FINDING_KIND_ORDER[finding.kind], tail)


def rejection_sort_key(rejection: ShiftRejection) -> tuple:
    return (rejection.day, rejection.in_time, rejection.out_time, rejection.shift_id, rejection.reason.value)


class RotaAssembler:
    """Builds deterministic validation reports from staff and child shifts.

    Identical input always yields an identical report, which is what lets
    revalidate() splice fresh findings for an edited shift into a previous
    report instead of recomputing the whole week.
    """

    def __init__(
        self,
        conflict_detector: Optional[ConflictDetector] = None,
        ratio_validator: Optional[RatioValidator] = None,
    ):
        self.conflict_detector = conflict_detector or ConflictDetector()
        self.ratio_validator = ratio_validator or RatioValidator()

    def assemble(
        self,
        member_shifts: Iterable[TaggedInterval],
        child_shifts: Mapping[AgeBand, Iterable[TaggedInterval]],
        rules: RatioRules,
    ) -> ValidationReport:
        """Validate staff shifts for conflicts and every day for ratios"""
        staff = list(member_shifts)
        children = {age_band: list(intervals) for age_band, intervals in child_shifts.items()}
        return self._assemble(staff, children, rules, rejections=[])

    def assemble_snapshot(
        self,
        snapshot: ShiftSnapshot,
        members: Iterable[Member],
        rules: RatioRules,
        check_ratios: bool = True,
    ) -> ValidationReport:
        """Validate a store snapshot against the member roster.

        Malformed rows and shifts of unknown members are reported as
        rejections and left out of every check.
        """
        staff, children, rejections = self._partition(snapshot, members)
        return self._assemble(staff, children, rules, rejections, check_ratios=check_ratios)

    def revalidate(
        self,
        previous: ValidationReport,
        snapshot: ShiftSnapshot,
        members: Iterable[Member],
        rules: RatioRules,
        edit: ShiftEdit,
    ) -> ValidationReport:
        """Update a report after a single shift edit.

        `previous` must be the report for the rota before the edit and
        `snapshot` the rota after it. Only the member-days and days touched
        by the edit are recomputed.
        """
        affected_groups: Set[Tuple[UUID, int]] = {(row.member_id, row.day) for row in edit.rows}
        affected_days: Set[int] = {row.day for row in edit.rows}

        staff, children, rejections = self._partition(snapshot.restricted_to_days(affected_days), members)

        findings = [
            finding
            for finding in previous.findings
            if not self._is_affected(finding, affected_groups, affected_days)
        ]
        findings.extend(self.conflict_detector.find_conflicts(
            tagged for tagged in staff if (tagged.member_id, tagged.day) in affected_groups
        ))
        findings.extend(self._check_ratios(staff, children, rules, affected_days))

        kept_rejections = [r for r in previous.rejections if r.shift_id != edit.shift_id]
        kept_rejections.extend(r for r in rejections if r.shift_id == edit.shift_id)

        logger.debug(
            f"Revalidated shift {edit.shift_id}: {len(affected_groups)} member-days, "
            f"{len(affected_days)} days"
        )
        return self._build_report(findings, kept_rejections)

    def _assemble(
        self,
        staff: List[TaggedInterval],
        children: Dict[AgeBand, List[TaggedInterval]],
        rules: RatioRules,
        rejections: List[ShiftRejection],
        check_ratios: bool = True,
    ) -> ValidationReport:
        findings = list(self.conflict_detector.find_conflicts(staff))
        if check_ratios:
            days = {tagged.day for tagged in staff}
            days.update(tagged.day for intervals in children.values() for tagged in intervals)
            findings.extend(self._check_ratios(staff, children, rules, days))

        report = self._build_report(findings, rejections)
        logger.debug(f"Assembled report: {report.summary()}")
        return report

    def _check_ratios(
        self,
        staff: List[TaggedInterval],
        children: Dict[AgeBand, List[TaggedInterval]],
        rules: RatioRules,
        days: Iterable[int],
    ) -> list:
        staff_by_day: Dict[int, List[TaggedInterval]] = defaultdict(list)
        for tagged in staff:
            staff_by_day[tagged.day].append(tagged)

        children_by_day: Dict[int, Dict[AgeBand, List[TaggedInterval]]] = defaultdict(lambda: defaultdict(list))
        for age_band, intervals in children.items():
            for tagged in intervals:
                children_by_day[tagged.day][age_band].append(tagged)

        violations = []
        for day in sorted(days):
            violations.extend(self.ratio_validator.validate_ratios(
                day,
                staff_by_day.get(day, []),
                children_by_day.get(day, {}),
                rules,
            ))
        return violations

    @staticmethod
    def _partition(
        snapshot: ShiftSnapshot,
        members: Iterable[Member],
    ) -> Tuple[List[TaggedInterval], Dict[AgeBand, List[TaggedInterval]], List[ShiftRejection]]:
        roster = {member.member_id: member for member in members}
        staff: List[TaggedInterval] = []
        children: Dict[AgeBand, List[TaggedInterval]] = defaultdict(list)
        rejections = list(snapshot.rejections())

        for tagged in snapshot:
            member = roster.get(tagged.member_id)
            if member is None:
                rejections.append(ShiftRejection(
                    shift_id=tagged.shift_id,
                    member_id=tagged.member_id,
                    day=tagged.day,
                    in_time=tagged.start,
                    out_time=tagged.end,
                    reason=RejectionReason.UNKNOWN_MEMBER,
                    message=f"Shift references unknown member {tagged.member_id}",
                ))
            elif isinstance(member, Child):
                children[member.age_band].append(tagged)
            else:
                staff.append(tagged)

        return staff, dict(children), rejections

    @staticmethod
    def _is_affected(finding, affected_groups: Set[Tuple[UUID, int]], affected_days: Set[int]) -> bool:
        if isinstance(finding, ConflictFinding):
            return (finding.member_id, finding.day) in affected_groups
        return finding.day in affected_days

    @staticmethod
    def _build_report(findings: list, rejections: List[ShiftRejection]) -> ValidationReport:
        return ValidationReport(
            findings=sorted(findings, key=finding_sort_key),
            rejections=sorted(rejections, key=rejection_sort_key),
        )
