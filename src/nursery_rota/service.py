"""
Validation service: loads rota snapshots and produces validation reports
"""
import logging
import time
from typing import Optional
from uuid import UUID

from .config import settings
from .core.assembler import RotaAssembler
from .database.shift_store import QueryHandle, ShiftStoreAdapter
from .logging_config import ValidationLogger
from .models import RatioRules, ShiftEdit, ValidationReport
from .utils.exceptions import FATAL_EXCEPTIONS

logger = logging.getLogger(__name__)


class RotaValidationService:
    """Runs validation passes against the shift store.

    The database handle is passed to every call; the service keeps no
    connection state of its own, so independent passes can run concurrently.
    """

    def __init__(
        self,
        rules: Optional[RatioRules] = None,
        store: Optional[ShiftStoreAdapter] = None,
        assembler: Optional[RotaAssembler] = None,
    ):
        self.rules = rules or settings.ratio_rules()
        self.store = store or ShiftStoreAdapter()
        self.assembler = assembler or RotaAssembler()
        self.validation_logger = ValidationLogger()
        logger.info(f"Rota validation service initialized ({self.rules.describe()})")

    async def validate(self, handle: QueryHandle, project_id: UUID) -> ValidationReport:
        """Full pass over one project: conflicts for every staff member and ratios for every day"""
        return await self._run(handle, project_id, scope=f"project:{project_id}")

    async def validate_member(
        self,
        handle: QueryHandle,
        project_id: UUID,
        member_id: UUID,
    ) -> ValidationReport:
        """Conflict pass over one member's shifts; ratios need the whole rota"""
        return await self._run(
            handle,
            project_id,
            scope=f"project:{project_id}:member:{member_id}",
            member_id=member_id,
        )

    async def revalidate(
        self,
        handle: QueryHandle,
        project_id: UUID,
        previous: ValidationReport,
        edit: ShiftEdit,
    ) -> ValidationReport:
        """Refresh a previous full project report after a single shift edit"""
        scope = f"project:{project_id}:edit:{edit.shift_id}"
        started = time.perf_counter()
        try:
            members = await self.store.load_members(handle, project_id)
            snapshot = await self.store.load(handle, project_id)
            self.validation_logger.log_validation_start(scope, len(snapshot), len(members))
            report = self.assembler.revalidate(previous, snapshot, members, self.rules, edit)
        except FATAL_EXCEPTIONS as e:
            self.validation_logger.log_validation_failure(scope, e)
            raise

        self._log_result(scope, report, started)
        return report

    async def _run(
        self,
        handle: QueryHandle,
        project_id: UUID,
        scope: str,
        member_id: Optional[UUID] = None,
    ) -> ValidationReport:
        started = time.perf_counter()
        try:
            members = await self.store.load_members(handle, project_id)
            snapshot = await self.store.load(handle, project_id, member_id=member_id)
            self.validation_logger.log_validation_start(scope, len(snapshot), len(members))
            report = self.assembler.assemble_snapshot(
                snapshot,
                members,
                self.rules,
                check_ratios=member_id is None,
            )
        except FATAL_EXCEPTIONS as e:
            self.validation_logger.log_validation_failure(scope, e)
            raise

        self._log_result(scope, report, started)
        return report

    def _log_result(self, scope: str, report: ValidationReport, started: float):
        for rejection in report.rejections:
            self.validation_logger.log_rejection(
                str(rejection.shift_id), rejection.reason.value, rejection.message
            )
        self.validation_logger.log_validation_result(
            scope,
            report.summary(),
            report.fingerprint(),
            (time.perf_counter() - started) * 1000,
        )
