"""Custom exceptions for the vesting engine.

Every exception here is a rejection: the operation that raised it made no
state change and emitted no transfer instruction.
"""


class VestingError(Exception):
    """Base exception for all vesting engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthorizationError(VestingError):
    """Raised when the caller does not hold the role an operation requires."""

    def __init__(self, operation: str, caller: bytes, required_role: str):
        message = f"Caller {caller.hex() or '<empty>'} is not the {required_role} (operation: {operation})"
        super().__init__(
            message,
            {"operation": operation, "caller": caller.hex(), "required_role": required_role},
        )
        self.operation = operation
        self.caller = caller
        self.required_role = required_role


class InvalidScheduleError(VestingError):
    """Raised when creation parameters violate a precondition."""

    def __init__(self, field: str, value: object, reason: str):
        message = f"Invalid schedule {field}={value}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class ScheduleAlreadyExistsError(InvalidScheduleError):
    """Raised when creating a schedule in a slot that is already initialized."""

    def __init__(self, schedule_id: str | None = None):
        super().__init__(
            "schedule_id",
            schedule_id,
            "a vesting schedule already exists and cannot be re-created",
        )
        self.schedule_id = schedule_id


class NotYetVestedError(VestingError):
    """Raised when a claim is attempted before the cliff."""

    def __init__(self, now: int, cliff_time: int):
        message = f"Cliff not reached: now={now}, cliff={cliff_time} ({cliff_time - now}s to go)"
        super().__init__(message, {"now": now, "cliff_time": cliff_time})
        self.now = now
        self.cliff_time = cliff_time


class NothingToClaimError(VestingError):
    """Raised when vested minus claimed is zero or negative."""

    def __init__(self, vested: int, claimed: int):
        message = f"No tokens available to claim (vested={vested}, claimed={claimed})"
        super().__init__(message, {"vested": vested, "claimed": claimed})
        self.vested = vested
        self.claimed = claimed


class NothingToRevokeError(VestingError):
    """Raised when there is no unvested balance left to return."""

    def __init__(self, total: int, vested: int, reason: str | None = None):
        message = f"No unvested tokens to revoke (total={total}, vested={vested})"
        if reason:
            message += f": {reason}"
        super().__init__(message, {"total": total, "vested": vested})
        self.total = total
        self.vested = vested


class ArithmeticOverflowError(VestingError):
    """Raised when an intermediate value leaves the unsigned 64-bit domain."""

    def __init__(self, operation: str, operands: tuple[int, ...]):
        message = f"u64 overflow in {operation}{operands}"
        super().__init__(message, {"operation": operation, "operands": list(operands)})
        self.operation = operation
        self.operands = operands


class ScheduleNotFoundError(VestingError):
    """Raised when a schedule id has no stored record."""

    def __init__(self, schedule_id: str):
        super().__init__(f"Vesting schedule not found: {schedule_id}", {"schedule_id": schedule_id})
        self.schedule_id = schedule_id


class ConfigurationError(VestingError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key
