"""Tests for the rota data models and helpers."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from nursery_rota.models import (
    AgeBand,
    Child,
    Day,
    RatioRules,
    ShiftEdit,
    ShiftRow,
    Staff,
    member_adapter,
)
from nursery_rota.utils.exceptions import ConfigurationError
from nursery_rota.utils.helpers import (
    ceil_div,
    format_time_range,
    minutes_to_time_string,
    time_string_to_minutes,
)


class TestDay:
    """Test day-of-week parsing (0=Sunday)."""

    def test_parse_names(self):
        assert Day.parse("Sunday") == Day.SUNDAY == 0
        assert Day.parse("monday") == Day.MONDAY == 1
        assert Day.parse("SATURDAY") == 6

    def test_parse_indexes(self):
        assert Day.parse(3) == Day.WEDNESDAY
        assert Day.parse("5") == Day.FRIDAY

    def test_invalid(self):
        with pytest.raises(ValueError):
            Day.parse("Funday")
        with pytest.raises(ValueError):
            Day.parse(7)

    def test_display(self):
        assert str(Day.THURSDAY) == "Thursday"


class TestShiftRow:
    """Test persisted shift rows."""

    def test_length(self):
        row = ShiftRow(id=uuid4(), member_id=uuid4(), day=Day.FRIDAY, in_time=540, out_time=1050)

        assert row.length == 510
        assert row.length_hours == (8, 30)

    def test_malformed_bounds_accepted(self):
        """The store does not enforce in_time < out_time, so neither does the row."""
        row = ShiftRow(id=uuid4(), member_id=uuid4(), day=1, in_time=900, out_time=800)
        assert row.length == -100


class TestMembers:
    """Test the staff/child tagged variant."""

    def test_discriminated_staff(self):
        member = member_adapter.validate_python({"kind": "staff", "member_id": str(uuid4()), "age_band": None})
        assert isinstance(member, Staff)

    def test_discriminated_child(self):
        member = member_adapter.validate_python({"kind": "child", "member_id": str(uuid4()), "age_band": "under_two"})

        assert isinstance(member, Child)
        assert member.age_band == AgeBand.UNDER_TWO

    def test_child_requires_age_band(self):
        with pytest.raises(ValidationError):
            member_adapter.validate_python({"kind": "child", "member_id": str(uuid4()), "age_band": None})

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            member_adapter.validate_python({"kind": "parent", "member_id": str(uuid4())})

    def test_name_length(self):
        Staff(member_id=uuid4(), name="a" * 255)
        with pytest.raises(ValidationError):
            Staff(member_id=uuid4(), name="")
        with pytest.raises(ValidationError):
            Staff(member_id=uuid4(), name="a" * 256)


class TestRatioRules:
    """Test required-staff calculation."""

    def test_rounds_up(self, one_to_three):
        assert one_to_three.required_staff({AgeBand.UNDER_TWO: 3}) == 1
        assert one_to_three.required_staff({AgeBand.UNDER_TWO: 4}) == 2
        assert one_to_three.required_staff({AgeBand.UNDER_TWO: 0}) == 0

    def test_each_band_rounds_separately(self, default_rules):
        composition = {AgeBand.UNDER_TWO: 1, AgeBand.TWO_YEAR_OLD: 1, AgeBand.THREE_PLUS: 1}
        assert default_rules.required_staff(composition) == 3

    def test_missing_band(self, one_to_three):
        with pytest.raises(ConfigurationError) as exc_info:
            one_to_three.required_staff({AgeBand.THREE_PLUS: 2})
        assert exc_info.value.config_key == "ratios"

    def test_non_positive_ratio(self):
        with pytest.raises(ValidationError):
            RatioRules(ratios={AgeBand.UNDER_TWO: 0})

    def test_describe(self, default_rules):
        assert default_rules.describe() == "under_two 1:3, two_year_old 1:5, three_plus 1:8"


class TestShiftEdit:
    """Test shift edit validation."""

    def test_requires_a_row(self):
        with pytest.raises(ValidationError):
            ShiftEdit()

    def test_same_shift(self):
        member_id = uuid4()
        before = ShiftRow(id=uuid4(), member_id=member_id, day=1, in_time=0, out_time=60)
        after = ShiftRow(id=uuid4(), member_id=member_id, day=1, in_time=0, out_time=90)
        with pytest.raises(ValidationError):
            ShiftEdit(before=before, after=after)

    def test_rows(self):
        row = ShiftRow(id=uuid4(), member_id=uuid4(), day=1, in_time=0, out_time=60)
        edit = ShiftEdit(after=row)

        assert edit.shift_id == row.id
        assert edit.rows == [row]


class TestHelpers:
    """Test time helpers."""

    def test_time_strings(self):
        assert time_string_to_minutes("07:30") == 450
        assert time_string_to_minutes("24:00") == 1440
        assert minutes_to_time_string(555) == "09:15"
        assert format_time_range(0, 1440) == "00:00-24:00"

    @pytest.mark.parametrize("value", ["25:00", "10:60", "24:01", "noon"])
    def test_invalid_time_strings(self, value):
        with pytest.raises(ValueError):
            time_string_to_minutes(value)

    def test_ceil_div(self):
        assert ceil_div(4, 3) == 2
        assert ceil_div(6, 3) == 2
        assert ceil_div(0, 3) == 0
