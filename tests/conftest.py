"""Shared fixtures for the rota engine tests."""

from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest

from nursery_rota.core.time_model import normalize
from nursery_rota.models import AgeBand, Child, RatioRules, ShiftRow, Staff, TaggedInterval


def make_row(member_id: UUID, day: int, in_time: int, out_time: int, shift_id: Optional[UUID] = None) -> ShiftRow:
    return ShiftRow(id=shift_id or uuid4(), member_id=member_id, day=day, in_time=in_time, out_time=out_time)


def make_interval(member_id: UUID, day: int, start: int, end: int, shift_id: Optional[UUID] = None) -> TaggedInterval:
    return TaggedInterval(
        shift_id=shift_id or uuid4(),
        member_id=member_id,
        interval=normalize(day, start, end),
    )


def member_record(member_id: UUID, kind: str, project_id: UUID, age_band: Optional[str] = None, name: Optional[str] = None) -> Dict:
    return {"member_id": member_id, "project_id": project_id, "kind": kind, "age_band": age_band, "name": name}


class FakeHandle:
    """In-memory stand-in for DatabaseManager.execute_query.

    Members are filtered by project like the roster query; shifts are joined
    to their member's project like the shift query.
    """

    def __init__(self, shifts: List[ShiftRow], members: List[Dict], error: Optional[Exception] = None):
        self.shifts = shifts
        self.members = members
        self.error = error
        self.queries = []

    async def execute_query(self, query: str, *args):
        self.queries.append((query, args))
        if self.error is not None:
            raise self.error
        project_id = args[0]
        in_project = [dict(row) for row in self.members if row.get("project_id") == project_id]
        if "member_name" in query:
            return in_project
        member_ids = {row["member_id"] for row in in_project}
        rows = [row.model_dump() for row in self.shifts if row.member_id in member_ids]
        if len(args) > 1:
            rows = [row for row in rows if row["member_id"] == args[1]]
        return rows


@pytest.fixture
def project_id():
    return uuid4()


@pytest.fixture
def one_to_three():
    """Single rule: one staff member per three under-twos"""
    return RatioRules(ratios={AgeBand.UNDER_TWO: 3})


@pytest.fixture
def default_rules():
    return RatioRules(ratios={
        AgeBand.UNDER_TWO: 3,
        AgeBand.TWO_YEAR_OLD: 5,
        AgeBand.THREE_PLUS: 8,
    })


@pytest.fixture
def staff_members():
    return [Staff(member_id=uuid4(), name=f"Staff {i}") for i in range(3)]


@pytest.fixture
def infants():
    return [Child(member_id=uuid4(), age_band=AgeBand.UNDER_TWO) for _ in range(4)]
