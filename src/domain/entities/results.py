"""Outcome and read-model entities returned by the session controller."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .records import ActivityRecord
from .therapy_session import TherapySession


class IgnoredReason(str, Enum):
    """Why a call did nothing: a missing precondition or an out-of-range argument."""
    NO_SESSION = "no_session"
    SESSION_NOT_ACTIVE = "session_not_active"
    NO_ACTIVITY = "no_activity"
    NO_BREAK = "no_break"
    INVALID_ARGUMENT = "invalid_argument"


class OperationResult(BaseModel):
    """Result of a mutating controller operation.

    Unmet preconditions are not errors: the operation is ignored and the
    reason is reported here instead of raising.
    """

    applied: bool
    reason: Optional[IgnoredReason] = None
    record_id: Optional[str] = None

    @classmethod
    def ok(cls, record_id: Optional[str] = None) -> "OperationResult":
        return cls(applied=True, record_id=record_id)

    @classmethod
    def ignored(cls, reason: IgnoredReason) -> "OperationResult":
        return cls(applied=False, reason=reason)

    def __bool__(self) -> bool:
        return self.applied


def format_time(seconds: int) -> str:
    """Format a number of seconds as ``M:SS``."""
    minutes, remaining = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{remaining:02d}"


class SessionSnapshot(BaseModel):
    """Read-only view of the derived session state."""

    current_session: Optional[TherapySession] = None
    current_activity: Optional[ActivityRecord] = None
    is_session_active: bool = False
    is_on_break: bool = False
    elapsed_time: int = 0
    remaining_time: int = 0

    @property
    def formatted_remaining(self) -> str:
        return format_time(self.remaining_time)
