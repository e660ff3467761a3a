"""Storage module for vesting schedule records."""

from .json_store import ScheduleStore

__all__ = ["ScheduleStore"]
