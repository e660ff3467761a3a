"""Revocation processor - returns unvested tokens to the grantor.

Revocation lowers total_tokens to the amount vested at that moment and
stamps revoked_at. What vested() reports afterwards depends on the
schedule's revocation mode:

- FREEZE: the lowered total is returned for every later time.
- RESCALE: the linear formula runs again on the lowered total, so
  vested(t) for t after revocation is below the amount frozen at revocation
  until the end of the schedule. This is the on-chain contract behaviour,
  where one field serves as both allocation and ceiling.

claimed_tokens is never touched, and a schedule can be revoked only once in
either mode. In RESCALE mode this is a deliberate departure from the on-chain
contract, which would accept a second revocation of the rescaled gap.
"""

import logging

from ..calculator.arithmetic import ensure_u64
from ..calculator.vesting import VestingCalculator
from ..core.exceptions import AuthorizationError, NothingToRevokeError
from ..core.models import OperationResult, TransferInstruction, VestingSchedule
from ..core.types import Operation, Role, Timestamp, TransferReason

logger = logging.getLogger(__name__)


class RevocationProcessor:
    """Applies a grantor revocation and produces the return instruction."""

    def __init__(self, calculator: VestingCalculator | None = None):
        self.calculator = calculator or VestingCalculator()

    def revoke(self, schedule: VestingSchedule, caller: bytes, now: Timestamp) -> OperationResult:
        """
        Revoke the unvested remainder of a schedule.

        Args:
            schedule: Current schedule value
            caller: Identity invoking the revocation
            now: Trusted current time in seconds

        Returns:
            OperationResult with total_tokens lowered to vested(now)

        Raises:
            AuthorizationError: caller is not the grantor
            NothingToRevokeError: already revoked, or everything has vested
        """
        ensure_u64("now", now)

        if bytes(caller) != schedule.grantor_id:
            raise AuthorizationError(Operation.REVOKE.value, bytes(caller), Role.GRANTOR.value)

        vested = self.calculator.vested(schedule, now)

        if schedule.is_revoked:
            raise NothingToRevokeError(
                schedule.total_tokens, vested, reason=f"already revoked at {schedule.revoked_at}"
            )

        unvested = self.calculator.unvested(schedule, now)
        if unvested == 0:
            raise NothingToRevokeError(schedule.total_tokens, vested)

        updated = schedule.model_copy(update={"total_tokens": vested, "revoked_at": now})
        instruction = TransferInstruction(
            asset=schedule.asset_id,
            to=schedule.grantor_id,
            amount=unvested,
            reason=TransferReason.REVOCATION,
        )

        logger.info(
            f"Revoked {unvested:,} at now={now}; ceiling {schedule.total_tokens:,} -> {vested:,} "
            f"(mode={schedule.revocation_mode.value})"
        )
        return OperationResult(schedule=updated, instruction=instruction)
