"""Domain entities for the therapy session tracker."""

from .records import (
    Achievement,
    AchievementType,
    ActivityRecord,
    AiAssessment,
    BreakRecord,
    BreakType,
    Intervention,
    InterventionType,
    SpeechSample,
    TherapistAssessment,
)
from .results import IgnoredReason, OperationResult, SessionSnapshot, format_time
from .therapy_session import (
    InvalidStatusTransition,
    SessionAggregate,
    SessionStatus,
    TherapySession,
)

__all__ = [
    # Session entities
    "TherapySession",
    "SessionAggregate",
    "SessionStatus",
    "InvalidStatusTransition",
    # Child records
    "ActivityRecord",
    "BreakRecord",
    "BreakType",
    "Intervention",
    "InterventionType",
    "Achievement",
    "AchievementType",
    "SpeechSample",
    "AiAssessment",
    "TherapistAssessment",
    # Controller results
    "OperationResult",
    "IgnoredReason",
    "SessionSnapshot",
    "format_time",
]
