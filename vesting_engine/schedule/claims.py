"""Claim processor - pays out vested-but-unclaimed tokens to the beneficiary."""

import logging

from ..calculator.arithmetic import checked_add, ensure_u64
from ..calculator.vesting import VestingCalculator
from ..core.exceptions import AuthorizationError, NothingToClaimError, NotYetVestedError
from ..core.models import OperationResult, TransferInstruction, VestingSchedule
from ..core.types import Operation, Role, Timestamp, TransferReason

logger = logging.getLogger(__name__)


class ClaimProcessor:
    """Applies a claim to a schedule and produces the payout instruction."""

    def __init__(self, calculator: VestingCalculator | None = None):
        self.calculator = calculator or VestingCalculator()

    def claim(self, schedule: VestingSchedule, caller: bytes, now: Timestamp) -> OperationResult:
        """
        Claim everything vested and not yet paid.

        Args:
            schedule: Current schedule value
            caller: Identity invoking the claim
            now: Trusted current time in seconds

        Returns:
            OperationResult with claimed_tokens raised by the payout

        Raises:
            AuthorizationError: caller is not the beneficiary
            NotYetVestedError: now is before the cliff
            NothingToClaimError: vested - claimed <= 0
        """
        ensure_u64("now", now)

        if bytes(caller) != schedule.beneficiary_id:
            raise AuthorizationError(Operation.CLAIM.value, bytes(caller), Role.BENEFICIARY.value)

        if now < schedule.cliff_time:
            raise NotYetVestedError(now, schedule.cliff_time)

        vested = self.calculator.vested(schedule, now)
        # Signed on purpose: a rescaled curve can sit below what was already paid
        claimable = vested - schedule.claimed_tokens
        if claimable <= 0:
            raise NothingToClaimError(vested, schedule.claimed_tokens)

        updated = schedule.model_copy(
            update={"claimed_tokens": checked_add(schedule.claimed_tokens, claimable)}
        )
        instruction = TransferInstruction(
            asset=schedule.asset_id,
            to=schedule.beneficiary_id,
            amount=claimable,
            reason=TransferReason.CLAIM,
        )

        logger.info(
            f"Claimed {claimable:,} at now={now}; claimed {schedule.claimed_tokens:,} -> "
            f"{updated.claimed_tokens:,} of {schedule.total_tokens:,}"
        )
        return OperationResult(schedule=updated, instruction=instruction)
