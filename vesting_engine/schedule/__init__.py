"""Schedule processing stages: validate, claim, revoke, query."""

from .validator import ScheduleValidator
from .claims import ClaimProcessor
from .revocation import RevocationProcessor
from .queries import QueryComposer

__all__ = ["ScheduleValidator", "ClaimProcessor", "RevocationProcessor", "QueryComposer"]
