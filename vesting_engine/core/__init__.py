"""Core module - data models, types, configuration and exceptions."""

from .models import (
    VestingSchedule,
    TransferInstruction,
    OperationResult,
    ScheduleSnapshot,
    VestingStatus,
    AuditEntry,
)
from .types import (
    U64_MAX,
    RevocationMode,
    TransferReason,
    Operation,
    Role,
)
from .exceptions import (
    VestingError,
    AuthorizationError,
    InvalidScheduleError,
    ScheduleAlreadyExistsError,
    NotYetVestedError,
    NothingToClaimError,
    NothingToRevokeError,
    ArithmeticOverflowError,
    ScheduleNotFoundError,
    ConfigurationError,
)
from .config import EngineConfig, get_config, reload_config

__all__ = [
    # Models
    "VestingSchedule",
    "TransferInstruction",
    "OperationResult",
    "ScheduleSnapshot",
    "VestingStatus",
    "AuditEntry",
    # Types
    "U64_MAX",
    "RevocationMode",
    "TransferReason",
    "Operation",
    "Role",
    # Exceptions
    "VestingError",
    "AuthorizationError",
    "InvalidScheduleError",
    "ScheduleAlreadyExistsError",
    "NotYetVestedError",
    "NothingToClaimError",
    "NothingToRevokeError",
    "ArithmeticOverflowError",
    "ScheduleNotFoundError",
    "ConfigurationError",
    # Config
    "EngineConfig",
    "get_config",
    "reload_config",
]
