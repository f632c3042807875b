"""Tests for staff-to-child ratio validation."""

from uuid import uuid4

import pytest

from conftest import make_interval

from nursery_rota.core.ratios import RatioValidator, validate_ratios
from nursery_rota.models import AgeBand, RatioRules
from nursery_rota.utils.exceptions import ConfigurationError


def children(band, count, day, start, end):
    return {band: [make_interval(uuid4(), day, start, end) for _ in range(count)]}


class TestRatioValidator:
    """Test the day timeline sweep."""

    def test_understaffed_window(self, one_to_three):
        """Four under-twos at 1:3 need two staff; one staff gives one violation."""
        staff = [make_interval(uuid4(), 0, 0, 600)]

        violations = validate_ratios(0, staff, children(AgeBand.UNDER_TWO, 4, 0, 0, 600), one_to_three)

        assert len(violations) == 1
        violation = violations[0]
        assert violation.day == 0
        assert (violation.start, violation.end) == (0, 600)
        assert violation.required_staff == 2
        assert violation.actual_staff == 1
        assert violation.child_count == 4
        assert violation.shortfall == 1

    def test_fully_staffed(self, one_to_three):
        staff = [make_interval(uuid4(), 0, 0, 600) for _ in range(2)]
        assert validate_ratios(0, staff, children(AgeBand.UNDER_TWO, 4, 0, 0, 600), one_to_three) == []

    def test_handover_is_not_a_gap(self, one_to_three):
        """Staff leaving and arriving at the same minute keep the room covered."""
        staff = [
            make_interval(uuid4(), 1, 420, 780),
            make_interval(uuid4(), 1, 780, 1080),
        ]
        infants = children(AgeBand.UNDER_TWO, 3, 1, 420, 1080)

        assert validate_ratios(1, staff, infants, one_to_three) == []

    def test_handover_does_not_double_count(self, one_to_three):
        """At a handover minute the leaving member does not cover the arriving children."""
        staff = [
            make_interval(uuid4(), 1, 420, 780),
            make_interval(uuid4(), 1, 780, 1080),
        ]
        infants = children(AgeBand.UNDER_TWO, 3, 1, 420, 1080)
        infants[AgeBand.UNDER_TWO].extend(make_interval(uuid4(), 1, 780, 900) for _ in range(3))

        violations = validate_ratios(1, staff, infants, one_to_three)

        assert [(v.start, v.end, v.required_staff, v.actual_staff) for v in violations] == [(780, 900, 2, 1)]

    def test_uncovered_gap(self, one_to_three):
        staff = [
            make_interval(uuid4(), 2, 420, 720),
            make_interval(uuid4(), 2, 750, 1080),
        ]
        infants = children(AgeBand.UNDER_TWO, 2, 2, 420, 1080)

        violations = validate_ratios(2, staff, infants, one_to_three)

        assert [(v.start, v.end, v.actual_staff) for v in violations] == [(720, 750, 0)]

    def test_adjacent_windows_merged(self, one_to_three):
        """Contiguous shortfalls with changing counts form one window with worst values."""
        staff = [make_interval(uuid4(), 3, 0, 600)]
        infants = children(AgeBand.UNDER_TWO, 4, 3, 0, 600)
        infants[AgeBand.UNDER_TWO].extend(make_interval(uuid4(), 3, 300, 600) for _ in range(3))

        violations = validate_ratios(3, staff, infants, one_to_three)

        assert len(violations) == 1
        violation = violations[0]
        assert (violation.start, violation.end) == (0, 600)
        assert violation.required_staff == 3
        assert violation.actual_staff == 1
        assert violation.child_count == 7

    def test_separate_windows_not_merged(self, one_to_three):
        infants = {AgeBand.UNDER_TWO: [
            make_interval(uuid4(), 4, 0, 100),
            make_interval(uuid4(), 4, 200, 300),
        ]}

        violations = validate_ratios(4, [], infants, one_to_three)

        assert [(v.start, v.end) for v in violations] == [(0, 100), (200, 300)]

    def test_mixed_age_bands(self, default_rules):
        """Each band rounds up separately: 1 infant + 1 toddler need two staff."""
        infants = children(AgeBand.UNDER_TWO, 1, 5, 0, 60)
        infants.update(children(AgeBand.TWO_YEAR_OLD, 1, 5, 0, 60))
        staff = [make_interval(uuid4(), 5, 0, 60)]

        violations = validate_ratios(5, staff, infants, default_rules)

        assert len(violations) == 1
        assert violations[0].required_staff == 2

    def test_overlapping_shifts_count_once(self, one_to_three):
        """A member double-booked over the same window is still one adult."""
        member = uuid4()
        staff = [make_interval(member, 6, 0, 600), make_interval(member, 6, 300, 600)]

        violations = validate_ratios(6, staff, children(AgeBand.UNDER_TWO, 4, 6, 0, 600), one_to_three)

        assert [(v.start, v.end, v.actual_staff) for v in violations] == [(0, 600, 1)]

    def test_child_with_consecutive_shifts_counts_once(self, one_to_three):
        child = uuid4()
        infants = {AgeBand.UNDER_TWO: [make_interval(child, 0, 0, 300), make_interval(child, 0, 300, 600)]}
        staff = [make_interval(uuid4(), 0, 0, 600)]

        assert validate_ratios(0, staff, infants, one_to_three) == []

    def test_other_days_ignored(self, one_to_three):
        staff = [make_interval(uuid4(), 1, 0, 600)]
        infants = children(AgeBand.UNDER_TWO, 9, 2, 0, 600)

        assert validate_ratios(1, staff, infants, one_to_three) == []

    def test_staff_without_children(self, one_to_three):
        staff = [make_interval(uuid4(), 1, 0, 600)]
        assert RatioValidator().validate_ratios(1, staff, {}, one_to_three) == []

    def test_band_without_rule(self):
        rules = RatioRules(ratios={AgeBand.UNDER_TWO: 3})
        with pytest.raises(ConfigurationError):
            validate_ratios(0, [], children(AgeBand.THREE_PLUS, 1, 0, 0, 60), rules)
