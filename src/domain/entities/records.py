"""Child record entities owned by a therapy session."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class BreakType(str, Enum):
    """Why a break was taken."""
    SCHEDULED = "scheduled"
    REQUESTED = "requested"
    EMERGENCY = "emergency"


class InterventionType(str, Enum):
    """Corrective action applied during an activity."""
    ATTENTION = "attention"
    MOTIVATION = "motivation"
    DIFFICULTY = "difficulty"
    RESET = "reset"


class AchievementType(str, Enum):
    """Milestone categories."""
    SOUND_MASTERY = "sound_mastery"
    PATTERN_IMPROVEMENT = "pattern_improvement"
    ENGAGEMENT = "engagement"
    MILESTONE = "milestone"


class ActivityRecord(BaseModel):
    """One timed practice task within a session.

    An activity is open while ``end_time`` is None. Interventions and speech
    samples are referenced by identifier; the records themselves live in the
    session aggregate.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    session_id: str
    activity_type: str
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    duration: int = Field(default=0, ge=0, description="Duration in seconds, set at close")
    difficulty: int = Field(default=1, ge=1, le=5)
    target_sounds: list[str] = Field(default_factory=list)
    target_patterns: list[str] = Field(default_factory=list)
    engagement_level: int = Field(default=0, ge=0, le=5)
    success_rate: float = Field(default=0, ge=0, le=100)
    tokens_earned: int = Field(default=0, ge=0)
    intervention_ids: list[str] = Field(default_factory=list)
    ai_content_used: bool = False
    speech_sample_ids: list[str] = Field(default_factory=list)
    notes: str = ""

    @property
    def is_open(self) -> bool:
        return self.end_time is None


class BreakRecord(BaseModel):
    """A pause within a session."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    session_id: str
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    duration: int = Field(default=0, ge=0)
    break_type: BreakType
    effectiveness: int = Field(default=0, ge=0, le=5)
    notes: str = ""

    @property
    def is_open(self) -> bool:
        return self.end_time is None


class Intervention(BaseModel):
    """Write-once log of a corrective action taken during an open activity."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    activity_id: str
    intervention_type: InterventionType
    timestamp: datetime = Field(default_factory=utc_now)
    effectiveness: int = Field(default=0, ge=0, le=5)
    notes: str = ""


class Achievement(BaseModel):
    """Milestone reached during a session."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    session_id: str
    achievement_type: AchievementType
    description: str
    timestamp: datetime = Field(default_factory=utc_now)
    reward_given: str
    notes: str = ""


class AiAssessment(BaseModel):
    """Machine assessment of a speech sample."""

    recognized: bool = False
    clarity: int = Field(default=1, ge=1, le=3)
    target_sound_accuracy: float = Field(default=0, ge=0, le=100)
    notes: str = ""


class TherapistAssessment(BaseModel):
    """Human assessment of a speech sample, zeroed until the therapist scores it."""

    clarity: int = Field(default=0, ge=0, le=3)
    target_sound_accuracy: float = Field(default=0, ge=0, le=100)
    notes: str = ""


class SpeechSample(BaseModel):
    """One recorded practice attempt."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    session_id: str
    activity_id: str
    target_sound: str
    target_word: str
    recording_url: str
    transcription: str
    ai_assessment: AiAssessment
    therapist_assessment: TherapistAssessment = Field(default_factory=TherapistAssessment)
    timestamp: datetime = Field(default_factory=utc_now)
