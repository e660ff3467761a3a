"""Query composer - read-only views over a schedule."""

from ..calculator.vesting import VestingCalculator
from ..core.models import ScheduleSnapshot, VestingSchedule, VestingStatus
from ..core.types import Timestamp


class QueryComposer:
    """Builds the schedule snapshot and the caller-relative status."""

    def __init__(self, calculator: VestingCalculator | None = None):
        self.calculator = calculator or VestingCalculator()

    def snapshot(self, schedule: VestingSchedule, now: Timestamp) -> ScheduleSnapshot:
        """Every stored field plus vested(now) and claimable(now)."""
        return ScheduleSnapshot(
            grantor_id=schedule.grantor_id,
            beneficiary_id=schedule.beneficiary_id,
            asset_id=schedule.asset_id,
            total_tokens=schedule.total_tokens,
            start_time=schedule.start_time,
            cliff_time=schedule.cliff_time,
            duration=schedule.duration,
            claimed_tokens=schedule.claimed_tokens,
            vested=self.calculator.vested(schedule, now),
            claimable=self.calculator.claimable(schedule, now),
            as_of=now,
            revoked_at=schedule.revoked_at,
            revocation_mode=schedule.revocation_mode,
        )

    def status(self, schedule: VestingSchedule, caller: bytes, now: Timestamp) -> VestingStatus:
        """Progress as seen by ``caller``; seconds_remaining saturates at 0."""
        return VestingStatus(
            vested=self.calculator.vested(schedule, now),
            claimable=self.calculator.claimable(schedule, now),
            claimed_tokens=schedule.claimed_tokens,
            is_beneficiary=bytes(caller) == schedule.beneficiary_id,
            cliff_reached=self.calculator.cliff_reached(schedule, now),
            seconds_remaining=self.calculator.seconds_remaining(schedule, now),
            as_of=now,
        )
