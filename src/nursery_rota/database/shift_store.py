"""Translation of persisted shift and member rows into engine inputs."""

import logging
from typing import Any, Iterable, Iterator, List, Optional, Protocol, Tuple, Union
from uuid import UUID

import asyncpg
from pydantic import ValidationError

from ..config import settings
from ..core.time_model import normalize
from ..models import (
    Member,
    RejectionReason,
    ShiftRejection,
    ShiftRow,
    TaggedInterval,
    TimeInterval,
    member_adapter,
)
from ..utils.exceptions import (
    INGESTION_EXCEPTIONS,
    ConfigurationError,
    InvalidInterval,
    StorageUnavailable,
)
from .connection import SCHEMA_ERRORS, STORAGE_ERRORS

logger = logging.getLogger(__name__)


class QueryHandle(Protocol):
    """Anything that can run a read query, e.g. DatabaseManager"""

    async def execute_query(self, query: str, *args) -> List[Any]:
        ...


class ShiftSnapshot:
    """Restartable sequence of tagged intervals over captured shift rows.

    Rows are normalized lazily on every pass. Iterating yields the valid
    intervals; rejections() yields the rows that failed normalization.
    """

    def __init__(self, rows: Iterable[ShiftRow]):
        self._rows: Tuple[ShiftRow, ...] = tuple(rows)

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "ShiftSnapshot":
        """Build from asyncpg records or plain mappings"""
        return cls(ShiftRow.model_validate(dict(record)) for record in records)

    @property
    def rows(self) -> Tuple[ShiftRow, ...]:
        return self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[TaggedInterval]:
        for row, outcome in self._normalized():
            if isinstance(outcome, TimeInterval):
                yield TaggedInterval(shift_id=row.id, member_id=row.member_id, interval=outcome)

    def rejections(self) -> Iterator[ShiftRejection]:
        for row, outcome in self._normalized():
            if isinstance(outcome, InvalidInterval):
                yield ShiftRejection.for_row(row, RejectionReason.INVALID_INTERVAL, outcome.message)

    def restricted_to_days(self, days: Iterable[int]) -> "ShiftSnapshot":
        wanted = set(days)
        return ShiftSnapshot(row for row in self._rows if row.day in wanted)

    def _normalized(self) -> Iterator[Tuple[ShiftRow, Union[TimeInterval, InvalidInterval]]]:
        for row in self._rows:
            try:
                interval = normalize(row.day, row.in_time, row.out_time)
            except INGESTION_EXCEPTIONS as e:
                yield row, e
                continue
            yield row, interval


class ShiftStoreAdapter:
    """Reads one project's shift and member snapshots through an injected query handle"""

    def __init__(self, shifts_table: Optional[str] = None, members_table: Optional[str] = None):
        self.shifts_table = shifts_table or settings.shifts_table
        self.members_table = members_table or settings.members_table

    async def load(
        self,
        handle: QueryHandle,
        project_id: UUID,
        member_id: Optional[UUID] = None,
    ) -> ShiftSnapshot:
        """Load a snapshot of a project's shifts, optionally for a single member"""
        query = (
            f"SELECT s.id, s.member_id, s.day, s.in_time, s.out_time "
            f"FROM {self.shifts_table} s "
            f"JOIN {self.members_table} m ON m.member_id = s.member_id "
            f"WHERE m.project_id = $1"
        )
        args = [project_id]
        if member_id is not None:
            query += " AND s.member_id = $2"
            args.append(member_id)
        query += " ORDER BY s.day, s.in_time, s.id"

        records = await self._fetch(handle, "load_shifts", query, *args)
        snapshot = ShiftSnapshot.from_records(records)
        logger.debug(f"Loaded {len(snapshot)} shifts for project {project_id}")
        return snapshot

    async def load_members(self, handle: QueryHandle, project_id: UUID) -> List[Member]:
        """Load a project's member roster as Staff/Child variants"""
        query = (
            f"SELECT member_id, project_id, kind, age_band, member_name AS name "
            f"FROM {self.members_table} WHERE project_id = $1 ORDER BY member_id"
        )
        records = await self._fetch(handle, "load_members", query, project_id)

        members = []
        for record in records:
            record = dict(record)
            try:
                members.append(member_adapter.validate_python(record))
            except ValidationError as e:
                member_id = record.get("member_id")
                logger.error(f"Invalid member row {member_id} in {self.members_table}: {e}")
                raise ConfigurationError(
                    f"Invalid member row {member_id}: {e.error_count()} validation error(s)",
                    config_key=self.members_table,
                    details={
                        "member_id": str(member_id),
                        "project_id": str(project_id),
                        "errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()],
                    },
                ) from e

        logger.debug(f"Loaded {len(members)} members for project {project_id}")
        return members

    async def _fetch(self, handle: QueryHandle, operation: str, query: str, *args) -> List[Any]:
        try:
            return await handle.execute_query(query, *args)
        except STORAGE_ERRORS as e:
            logger.error(f"Shift store unavailable during {operation}: {e}")
            raise StorageUnavailable(
                f"Shift store unavailable during {operation}: {e}",
                operation=operation,
            ) from e
        except SCHEMA_ERRORS as e:
            logger.error(f"Shift store schema mismatch during {operation}: {e}")
            raise ConfigurationError(
                f"Shift store schema mismatch during {operation}: {e}",
                details={
                    "operation": operation,
                    "shifts_table": self.shifts_table,
                    "members_table": self.members_table,
                },
            ) from e
        except asyncpg.PostgresError as e:
            logger.error(f"Shift store query failed during {operation}: {e}")
            raise StorageUnavailable(
                f"Shift store query failed during {operation}: {e}",
                operation=operation,
            ) from e
