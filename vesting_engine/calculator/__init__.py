"""Vesting calculation module."""

from .vesting import VestingCalculator, calc_vested, calc_claimable, calc_unvested
from .arithmetic import checked_add, checked_sub, mul_div_floor

__all__ = [
    "VestingCalculator",
    "calc_vested",
    "calc_claimable",
    "calc_unvested",
    "checked_add",
    "checked_sub",
    "mul_div_floor",
]
