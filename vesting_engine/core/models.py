"""Pydantic data models for the vesting engine.

All data structures are immutable (frozen) after creation. Operations never
mutate a schedule in place; they return an updated copy, so a rejected
operation leaves the caller's value untouched by construction.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer, model_validator

from .types import (
    U64_MAX,
    AssetRef,
    Operation,
    RevocationMode,
    Seconds,
    Timestamp,
    TokenAmount,
    TransferReason,
)


def _decode_identity(value: Any) -> Any:
    """Accept hex strings (JSON, CLI) as well as raw bytes."""
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    return value


# Identities are raw bytes in Python and hex strings in JSON
IdentityBytes = Annotated[
    bytes,
    BeforeValidator(_decode_identity),
    PlainSerializer(lambda v: v.hex(), return_type=str, when_used="json"),
]

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VestingSchedule(BaseModel):
    """A single-beneficiary vesting schedule."""

    grantor_id: IdentityBytes
    beneficiary_id: IdentityBytes
    asset_id: AssetRef = Field(gt=0, le=U64_MAX)
    total_tokens: U64
    start_time: U64
    cliff_time: U64
    duration: Seconds = Field(gt=0, le=U64_MAX)
    claimed_tokens: U64 = 0
    revocation_mode: RevocationMode = RevocationMode.FREEZE
    revoked_at: U64 | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_invariants(self) -> "VestingSchedule":
        if self.cliff_time < self.start_time:
            raise ValueError(f"cliff_time {self.cliff_time} precedes start_time {self.start_time}")
        if self.claimed_tokens > self.total_tokens:
            raise ValueError(
                f"claimed_tokens {self.claimed_tokens} exceeds total_tokens {self.total_tokens}"
            )
        if self.revoked_at is None and self.total_tokens == 0:
            raise ValueError("total_tokens must be positive while the schedule is live")
        return self

    @property
    def end_time(self) -> Timestamp:
        """Timestamp at which the schedule is fully vested."""
        return self.start_time + self.duration

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None


class TransferInstruction(BaseModel):
    """Declarative asset movement for an external executor to carry out."""

    asset: AssetRef = Field(gt=0, le=U64_MAX)
    to: IdentityBytes
    amount: TokenAmount = Field(gt=0, le=U64_MAX)
    reason: TransferReason

    model_config = {"frozen": True}


class OperationResult(BaseModel):
    """Outcome of a mutating operation: the new schedule and what to transfer."""

    schedule: VestingSchedule
    instruction: TransferInstruction

    model_config = {"frozen": True}


class ScheduleSnapshot(BaseModel):
    """Full view of a schedule at a point in time.

    Consumers decode ``as_tuple()`` positionally, so the order of
    ``TUPLE_FIELDS`` is part of the public contract.
    """

    TUPLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "grantor_id",
        "beneficiary_id",
        "asset_id",
        "total_tokens",
        "start_time",
        "cliff_time",
        "duration",
        "claimed_tokens",
        "vested",
        "claimable",
    )

    grantor_id: IdentityBytes
    beneficiary_id: IdentityBytes
    asset_id: AssetRef
    total_tokens: TokenAmount
    start_time: Timestamp
    cliff_time: Timestamp
    duration: Seconds
    claimed_tokens: TokenAmount
    vested: TokenAmount
    claimable: TokenAmount
    as_of: Timestamp
    revoked_at: Timestamp | None = None
    revocation_mode: RevocationMode = RevocationMode.FREEZE

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple:
        return tuple(getattr(self, name) for name in self.TUPLE_FIELDS)


class VestingStatus(BaseModel):
    """Caller-relative view of a schedule."""

    TUPLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "vested",
        "claimable",
        "claimed_tokens",
        "is_beneficiary",
        "cliff_reached",
        "seconds_remaining",
    )

    vested: TokenAmount
    claimable: TokenAmount
    claimed_tokens: TokenAmount
    is_beneficiary: bool
    cliff_reached: bool
    seconds_remaining: Seconds
    as_of: Timestamp

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple:
        return tuple(getattr(self, name) for name in self.TUPLE_FIELDS)


class AuditEntry(BaseModel):
    """Audit trail entry for an attempted engine operation."""

    operation: Operation
    schedule_id: str | None = None
    caller: IdentityBytes | None = None
    now: Timestamp | None = None
    success: bool = True
    amount: TokenAmount | None = None
    error_type: str | None = None
    error_message: str | None = None
    recorded_at: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}
