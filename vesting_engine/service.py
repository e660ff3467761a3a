"""Store-backed vesting service.

Binds a VestingEngine to a ScheduleStore so that operations can be addressed
by schedule id. Each mutating call loads the record and runs the engine with a
commit step that writes the updated record, so an operation is audited as a
success only once it is stored. The engine's audit entries are appended to the
schedule's log whether the call succeeded or not.

The caller must serialize mutating calls per schedule id.
"""

import logging
from pathlib import Path

from .core.config import EngineConfig, get_config
from .core.models import (
    AuditEntry,
    OperationResult,
    ScheduleSnapshot,
    VestingSchedule,
    VestingStatus,
)
from .core.types import Timestamp, TokenAmount
from .engine import VestingEngine
from .storage.json_store import ScheduleStore

logger = logging.getLogger(__name__)


class VestingService:
    """Schedule operations keyed by schedule id."""

    def __init__(
        self,
        engine: VestingEngine | None = None,
        store: ScheduleStore | None = None,
        config: EngineConfig | None = None,
        data_dir: Path | None = None,
    ):
        """
        Initialize the service.

        Args:
            engine: Engine to run operations (built from config if not provided)
            store: Schedule store (opened at data_dir or the configured data_dir)
            config: Engine configuration (uses the global config if not provided)
            data_dir: Override for the configured data directory
        """
        self.config = config or get_config()
        self.engine = engine or VestingEngine(config=self.config)
        self.store = store or ScheduleStore(data_dir or self.config.data_dir)

    def _flush_audit(self, schedule_id: str) -> None:
        self.store.append_audit(schedule_id, self.engine.drain_audit())

    def create_vesting(
        self,
        schedule_id: str,
        caller: bytes,
        beneficiary_id: bytes,
        asset_id: int,
        total: int,
        start: int,
        cliff: int,
        duration: int,
        authority: bytes | None = None,
    ) -> VestingSchedule:
        """Create and persist a schedule; rejects ids that already exist."""
        try:
            return self.engine.create_vesting(
                caller,
                beneficiary_id,
                asset_id,
                total,
                start,
                cliff,
                duration,
                authority=authority,
                existing=self.store.load(schedule_id),
                schedule_id=schedule_id,
                commit=lambda new: self.store.create(schedule_id, new),
            )
        finally:
            self._flush_audit(schedule_id)

    def vested(self, schedule_id: str, now: Timestamp) -> TokenAmount:
        return self.engine.vested(self.store.get(schedule_id), now)

    def claim(self, schedule_id: str, caller: bytes, now: Timestamp) -> OperationResult:
        """Claim for the beneficiary and persist the new claimed total."""
        try:
            return self.engine.claim(
                self.store.get(schedule_id),
                caller,
                now,
                schedule_id=schedule_id,
                commit=lambda result: self.store.save(schedule_id, result.schedule),
            )
        finally:
            self._flush_audit(schedule_id)

    def revoke(self, schedule_id: str, caller: bytes, now: Timestamp) -> OperationResult:
        """Revoke for the grantor and persist the lowered ceiling."""
        try:
            return self.engine.revoke(
                self.store.get(schedule_id),
                caller,
                now,
                schedule_id=schedule_id,
                commit=lambda result: self.store.save(schedule_id, result.schedule),
            )
        finally:
            self._flush_audit(schedule_id)

    def get_vesting_info(self, schedule_id: str, now: Timestamp) -> ScheduleSnapshot:
        return self.engine.get_vesting_info(self.store.get(schedule_id), now)

    def get_user_status(self, schedule_id: str, caller: bytes, now: Timestamp) -> VestingStatus:
        return self.engine.get_user_status(self.store.get(schedule_id), caller, now)

    def list_schedules(self) -> list[str]:
        return self.store.list_all()

    def audit_trail(self, schedule_id: str) -> list[AuditEntry]:
        return self.store.load_audit(schedule_id)
