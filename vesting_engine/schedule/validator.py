"""Creation-time validation for vesting schedules.

Every precondition is a distinct rejection. Checks run in a fixed order so
that the first violated rule is the one reported:

1. the target slot is empty (schedules are single-use)
2. the caller is the designated authority
3. integer arguments fit in u64
4. total > 0, duration > 0, cliff >= start, asset != 0
5. beneficiary identity is non-empty
6. start + duration fits in u64
"""

import logging

from ..calculator.arithmetic import checked_add
from ..core.exceptions import (
    AuthorizationError,
    InvalidScheduleError,
    ScheduleAlreadyExistsError,
)
from ..core.models import VestingSchedule
from ..core.types import U64_MAX, Operation, RevocationMode, Role

logger = logging.getLogger(__name__)


class ScheduleValidator:
    """Validates creation parameters and builds the initial schedule."""

    def __init__(self, revocation_mode: RevocationMode = RevocationMode.FREEZE):
        """
        Initialize the validator.

        Args:
            revocation_mode: Mode stamped onto every schedule this validator creates
        """
        self.revocation_mode = RevocationMode(revocation_mode)

    @staticmethod
    def _require_u64(field: str, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidScheduleError(field, value, "must be an integer")
        if not 0 <= value <= U64_MAX:
            raise InvalidScheduleError(field, value, "must fit in an unsigned 64-bit integer")
        return value

    def validate(
        self,
        caller: bytes,
        authority: bytes,
        beneficiary_id: bytes,
        asset_id: int,
        total: int,
        start: int,
        cliff: int,
        duration: int,
        existing: VestingSchedule | None = None,
        schedule_id: str | None = None,
    ) -> None:
        """
        Check every creation precondition.

        Raises:
            ScheduleAlreadyExistsError: existing is not None
            AuthorizationError: caller != authority
            InvalidScheduleError: any parameter rule is violated
            ArithmeticOverflowError: start + duration leaves u64
        """
        if existing is not None:
            raise ScheduleAlreadyExistsError(schedule_id)

        if bytes(caller) != bytes(authority):
            raise AuthorizationError(Operation.CREATE.value, bytes(caller), Role.AUTHORITY.value)

        for field, value in (
            ("asset_id", asset_id),
            ("total", total),
            ("start", start),
            ("cliff", cliff),
            ("duration", duration),
        ):
            self._require_u64(field, value)

        if total == 0:
            raise InvalidScheduleError("total", total, "must vest some tokens")
        if duration == 0:
            raise InvalidScheduleError("duration", duration, "must be greater than 0")
        if cliff < start:
            raise InvalidScheduleError("cliff", cliff, f"must be at or after start ({start})")
        if asset_id == 0:
            raise InvalidScheduleError("asset_id", asset_id, "invalid asset reference")
        if not beneficiary_id:
            raise InvalidScheduleError("beneficiary_id", beneficiary_id, "must not be empty")

        checked_add(start, duration)

    def create(
        self,
        caller: bytes,
        authority: bytes,
        beneficiary_id: bytes,
        asset_id: int,
        total: int,
        start: int,
        cliff: int,
        duration: int,
        existing: VestingSchedule | None = None,
        schedule_id: str | None = None,
    ) -> VestingSchedule:
        """
        Validate parameters and return a fresh schedule.

        The grantor is always the authority that created the schedule.

        Returns:
            New VestingSchedule with claimed_tokens = 0
        """
        self.validate(
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
        )

        schedule = VestingSchedule(
            grantor_id=bytes(authority),
            beneficiary_id=bytes(beneficiary_id),
            asset_id=asset_id,
            total_tokens=total,
            start_time=start,
            cliff_time=cliff,
            duration=duration,
            claimed_tokens=0,
            revocation_mode=self.revocation_mode,
        )

        logger.info(
            f"Created vesting of {total:,} units of asset {asset_id} for {schedule.beneficiary_id.hex()} "
            f"(start={start}, cliff={cliff}, duration={duration}s, mode={self.revocation_mode.value})"
        )
        return schedule
