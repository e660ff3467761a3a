"""Vesting engine - the single entry point for schedule operations.

Coordinates the validator, calculator, claim, revocation and query stages,
and keeps an audit trail of every attempted operation, including rejected
ones. Schedules are passed in and returned as values; the engine holds no
schedule state of its own.
"""

import logging
from typing import Callable, TypeVar

from .calculator.vesting import VestingCalculator
from .core.config import EngineConfig, get_config
from .core.exceptions import VestingError
from .core.models import (
    AuditEntry,
    OperationResult,
    ScheduleSnapshot,
    VestingSchedule,
    VestingStatus,
)
from .core.types import Operation, RevocationMode, Timestamp, TokenAmount
from .schedule.claims import ClaimProcessor
from .schedule.queries import QueryComposer
from .schedule.revocation import RevocationProcessor
from .schedule.validator import ScheduleValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VestingEngine:
    """Runs the vesting pipeline over explicit schedule values."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        revocation_mode: RevocationMode | str | None = None,
        authority: bytes | None = None,
    ):
        """
        Initialize the engine with all stages.

        Args:
            config: Engine configuration (uses the global config if not provided)
            revocation_mode: Override for the configured revocation mode
            authority: Override for the configured creator identity
        """
        self.config = config or get_config()
        self.revocation_mode = RevocationMode(revocation_mode or self.config.revocation_mode)
        self.authority = authority if authority is not None else self.config.authority_id

        # Initialize stages
        self.calculator = VestingCalculator()
        self.validator = ScheduleValidator(revocation_mode=self.revocation_mode)
        self.claim_processor = ClaimProcessor(self.calculator)
        self.revocation_processor = RevocationProcessor(self.calculator)
        self.query_composer = QueryComposer(self.calculator)

        # Audit trail
        self._audit_entries: list[AuditEntry] = []

    @property
    def audit_trail(self) -> list[AuditEntry]:
        """Audit entries recorded since the last drain."""
        return list(self._audit_entries)

    def drain_audit(self) -> list[AuditEntry]:
        """Return and clear the recorded audit entries."""
        entries, self._audit_entries = self._audit_entries, []
        return entries

    def _add_audit(
        self,
        operation: Operation,
        schedule_id: str | None,
        caller: bytes | None,
        now: Timestamp | None,
        success: bool = True,
        amount: TokenAmount | None = None,
        error: VestingError | None = None,
    ) -> None:
        """Add an audit entry."""
        self._audit_entries.append(
            AuditEntry(
                operation=operation,
                schedule_id=schedule_id,
                caller=caller,
                now=now,
                success=success,
                amount=amount,
                error_type=type(error).__name__ if error else None,
                error_message=error.message if error else None,
            )
        )

    def _run(
        self,
        operation: Operation,
        schedule_id: str | None,
        caller: bytes | None,
        now: Timestamp | None,
        action: Callable[[], T],
        amount_of: Callable[[T], TokenAmount | None] = lambda _: None,
        commit: Callable[[T], object] | None = None,
    ) -> T:
        """
        Execute one stage, recording the outcome before returning or re-raising.

        ``commit`` persists the result; the operation is audited as a success
        only once it has returned.
        """
        label = schedule_id or "<unsaved>"
        try:
            result = action()
            if commit is not None:
                commit(result)
        except VestingError as e:
            logger.warning(f"[{label}] {operation.value} rejected: {e.message}")
            self._add_audit(operation, schedule_id, caller, now, success=False, error=e)
            raise

        self._add_audit(operation, schedule_id, caller, now, amount=amount_of(result))
        return result

    def create_vesting(
        self,
        caller: bytes,
        beneficiary_id: bytes,
        asset_id: int,
        total: int,
        start: int,
        cliff: int,
        duration: int,
        authority: bytes | None = None,
        existing: VestingSchedule | None = None,
        schedule_id: str | None = None,
        commit: Callable[[VestingSchedule], object] | None = None,
    ) -> VestingSchedule:
        """
        Create a schedule.

        Args:
            caller: Identity invoking creation
            beneficiary_id: Identity allowed to claim
            asset_id: Non-zero reference to the vested token
            total: Allocation in whole token units
            start: Curve origin (unix seconds)
            cliff: Earliest claim time (unix seconds)
            duration: Seconds from start to full vesting
            authority: Designated creator; defaults to the configured authority,
                       or to the caller when none is configured
            existing: Record already occupying the target slot, if any
            schedule_id: Slot identifier, used for audit and error reporting
            commit: Persists the new schedule; a failure here is audited as a rejection

        Returns:
            The new VestingSchedule
        """
        if authority is None:
            authority = self.authority if self.authority is not None else caller

        return self._run(
            Operation.CREATE,
            schedule_id,
            caller,
            None,
            lambda: self.validator.create(
                caller,
                authority,
                beneficiary_id,
                asset_id,
                total,
                start,
                cliff,
                duration,
                existing=existing,
                schedule_id=schedule_id,
            ),
            lambda schedule: schedule.total_tokens,
            commit,
        )

    def vested(self, schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
        """Amount vested at ``now``. Pure; not audited."""
        return self.calculator.vested(schedule, now)

    def claim(
        self,
        schedule: VestingSchedule,
        caller: bytes,
        now: Timestamp,
        schedule_id: str | None = None,
        commit: Callable[[OperationResult], object] | None = None,
    ) -> OperationResult:
        """Claim all claimable tokens for the beneficiary."""
        return self._run(
            Operation.CLAIM,
            schedule_id,
            caller,
            now,
            lambda: self.claim_processor.claim(schedule, caller, now),
            lambda result: result.instruction.amount,
            commit,
        )

    def revoke(
        self,
        schedule: VestingSchedule,
        caller: bytes,
        now: Timestamp,
        schedule_id: str | None = None,
        commit: Callable[[OperationResult], object] | None = None,
    ) -> OperationResult:
        """Revoke the unvested remainder back to the grantor."""
        return self._run(
            Operation.REVOKE,
            schedule_id,
            caller,
            now,
            lambda: self.revocation_processor.revoke(schedule, caller, now),
            lambda result: result.instruction.amount,
            commit,
        )

    def get_vesting_info(self, schedule: VestingSchedule, now: Timestamp) -> ScheduleSnapshot:
        """Schedule snapshot at ``now``."""
        return self.query_composer.snapshot(schedule, now)

    def get_user_status(self, schedule: VestingSchedule, caller: bytes, now: Timestamp) -> VestingStatus:
        """Caller-relative status at ``now``."""
        return self.query_composer.status(schedule, caller, now)
