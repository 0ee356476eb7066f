"""Session entities for the therapy session tracker."""
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from .records import (
    Achievement,
    ActivityRecord,
    BreakRecord,
    Intervention,
    SpeechSample,
    utc_now,
)


class SessionStatus(str, Enum):
    """Session status enum."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: Dict[SessionStatus, frozenset] = {
    SessionStatus.SCHEDULED: frozenset({SessionStatus.IN_PROGRESS}),
    SessionStatus.IN_PROGRESS: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}


class InvalidStatusTransition(ValueError):
    """Raised when a session status would move backwards or skip a state."""

    def __init__(self, current: SessionStatus, target: SessionStatus):
        super().__init__(f"Cannot move session from {current.value} to {target.value}")
        self.current = current
        self.target = target


class TherapySession(BaseModel):
    """Root of the session aggregate.

    Child records are referenced by identifier in insertion order; the
    records themselves are stored in the enclosing ``SessionAggregate``.
    """

    id: str
    patient_id: str
    therapist_id: str
    date: datetime = Field(default_factory=utc_now)
    duration: int = Field(default=45, ge=1, description="Planned duration in minutes")
    actual_duration: int = Field(default=0, ge=0, description="Actual duration in minutes")
    status: SessionStatus = SessionStatus.SCHEDULED
    activity_ids: list[str] = Field(default_factory=list)
    break_ids: list[str] = Field(default_factory=list)
    achievement_ids: list[str] = Field(default_factory=list)
    speech_sample_ids: list[str] = Field(default_factory=list)
    tokens_earned: int = Field(default=0, ge=0)
    overall_engagement: float = Field(default=0, ge=0, le=5)
    notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        json_schema_extra = {
            "example": {
                "id": "3f9c2a7e5b0d4c1e8a6f2b9d7e4c1a05",
                "patient_id": "patient-001",
                "therapist_id": "therapist-042",
                "duration": 45,
                "status": "in-progress",
                "tokens_earned": 3,
            }
        }

    def transition_to(self, target: SessionStatus) -> None:
        """Move the session to ``target`` if the lifecycle allows it."""
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransition(self.status, target)
        self.status = target

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or utc_now()


class SessionAggregate(BaseModel):
    """The full persisted session: the root plus flat, id-keyed child arenas."""

    session: TherapySession
    activities: Dict[str, ActivityRecord] = Field(default_factory=dict)
    breaks: Dict[str, BreakRecord] = Field(default_factory=dict)
    interventions: Dict[str, Intervention] = Field(default_factory=dict)
    achievements: Dict[str, Achievement] = Field(default_factory=dict)
    speech_samples: Dict[str, SpeechSample] = Field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.session.id

    @property
    def status(self) -> SessionStatus:
        return self.session.status

    @property
    def is_in_progress(self) -> bool:
        return self.session.status == SessionStatus.IN_PROGRESS
