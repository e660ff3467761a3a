"""Type definitions and enums for the vesting engine."""

from enum import Enum


class RevocationMode(str, Enum):
    """How the vesting curve behaves once a schedule has been revoked."""

    FREEZE = "freeze"    # vested() is pinned to the ceiling captured at revocation
    RESCALE = "rescale"  # vested() re-runs the linear formula on the lowered total

    @property
    def description(self) -> str:
        """Human-readable description."""
        descriptions = {
            RevocationMode.FREEZE: "Vested amount frozen at revocation",
            RevocationMode.RESCALE: "Linear curve rescaled to the revoked total",
        }
        return descriptions.get(self, self.value)


class TransferReason(str, Enum):
    """Why a transfer instruction was emitted."""

    CLAIM = "claim"
    REVOCATION = "revocation"


class Operation(str, Enum):
    """Engine operations, as recorded in the audit trail."""

    CREATE = "create"
    CLAIM = "claim"
    REVOKE = "revoke"


class Role(str, Enum):
    """Roles captured on a schedule at creation."""

    AUTHORITY = "authority"
    GRANTOR = "grantor"
    BENEFICIARY = "beneficiary"


# Unsigned 64-bit integer domain
U64_MAX = 2**64 - 1

# Type aliases for common patterns
AssetRef = int       # Opaque non-zero asset reference
TokenAmount = int    # Whole token units
Timestamp = int      # Unix timestamp in seconds
Seconds = int        # Duration in seconds
