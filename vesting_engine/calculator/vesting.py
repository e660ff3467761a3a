"""Vested-amount calculator.

All amounts follow one piecewise formula:
- before the cliff:            vested = 0
- at or after start + duration: vested = total
- otherwise:                   vested = floor(total × (now − start) / duration)

Floor division is intentional: fractional tokens are never released early.
The calculator is pure; it never reads a clock and never touches storage.
"""

import logging

from ..core.models import VestingSchedule
from ..core.types import RevocationMode, Seconds, Timestamp, TokenAmount
from .arithmetic import checked_add, checked_sub, ensure_u64, mul_div_floor, saturating_sub

logger = logging.getLogger(__name__)


def calc_linear_vested(
    total: TokenAmount,
    start: Timestamp,
    cliff: Timestamp,
    duration: Seconds,
    now: Timestamp,
) -> TokenAmount:
    """Piecewise cliff + linear curve on raw parameters."""
    ensure_u64("now", now)
    if now < cliff:
        return 0

    end = checked_add(start, duration)
    if now >= end:
        return total

    elapsed = checked_sub(now, start)
    return mul_div_floor(total, elapsed, duration)


def calc_vested(schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
    """
    Amount earned by ``now``, independent of what has been claimed.

    A revoked schedule in FREEZE mode returns its frozen ceiling for every
    ``now`` at or after revocation; the cliff still gates earlier times. In
    RESCALE mode the curve is recomputed on the lowered total, which can drop
    below what was vested at revocation time.
    """
    ensure_u64("now", now)
    if (
        schedule.is_revoked
        and schedule.revocation_mode == RevocationMode.FREEZE
        and now >= schedule.cliff_time
        and now >= schedule.revoked_at
    ):
        return schedule.total_tokens

    return calc_linear_vested(
        schedule.total_tokens,
        schedule.start_time,
        schedule.cliff_time,
        schedule.duration,
        now,
    )


def calc_claimable(schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
    """Vested minus claimed, clamped at zero."""
    return saturating_sub(calc_vested(schedule, now), schedule.claimed_tokens)


def calc_unvested(schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
    """Portion of the ceiling not yet earned."""
    return checked_sub(schedule.total_tokens, calc_vested(schedule, now))


def calc_seconds_remaining(schedule: VestingSchedule, now: Timestamp) -> Seconds:
    """Seconds until full vesting; 0 once the end has passed."""
    return saturating_sub(checked_add(schedule.start_time, schedule.duration), now)


class VestingCalculator:
    """Calculates vesting amounts for a schedule at a given time."""

    def vested(self, schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
        vested = calc_vested(schedule, now)
        logger.debug(
            f"vested(now={now}) = {vested:,} of {schedule.total_tokens:,} "
            f"(start={schedule.start_time}, cliff={schedule.cliff_time}, duration={schedule.duration}s)"
        )
        return vested

    def claimable(self, schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
        return calc_claimable(schedule, now)

    def unvested(self, schedule: VestingSchedule, now: Timestamp) -> TokenAmount:
        return calc_unvested(schedule, now)

    def seconds_remaining(self, schedule: VestingSchedule, now: Timestamp) -> Seconds:
        return calc_seconds_remaining(schedule, now)

    def cliff_reached(self, schedule: VestingSchedule, now: Timestamp) -> bool:
        return now >= schedule.cliff_time
