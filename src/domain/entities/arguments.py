"""Validated arguments for session controller operations.

Each model mirrors the bounds of the record fields it is written to, so an
operation can be checked before it touches the session aggregate.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .records import (
    AchievementType,
    AiAssessment,
    BreakType,
    InterventionType,
    TherapistAssessment,
)


class SessionStartArguments(BaseModel):
    patient_id: str
    therapist_id: str
    planned_duration: Optional[int] = Field(default=None, ge=1)


class ActivityStartArguments(BaseModel):
    activity_type: str
    target_sounds: list[str] = Field(default_factory=list)
    target_patterns: list[str] = Field(default_factory=list)
    difficulty: int = Field(ge=1, le=5)


class ActivityScoreArguments(BaseModel):
    """Scores given when an activity is finished; tokens can never be negative."""

    engagement_level: int = Field(ge=0, le=5)
    success_rate: float = Field(ge=0, le=100)
    tokens_earned: int = Field(ge=0)
    notes: Optional[str] = None


class BreakStartArguments(BaseModel):
    break_type: BreakType


class BreakScoreArguments(BaseModel):
    effectiveness: int = Field(ge=0, le=5)
    notes: Optional[str] = None


class InterventionArguments(BaseModel):
    intervention_type: InterventionType
    effectiveness: int = Field(ge=0, le=5)
    notes: Optional[str] = None


class AchievementArguments(BaseModel):
    achievement_type: AchievementType
    description: str
    reward_given: str
    notes: Optional[str] = None


class SpeechSampleArguments(BaseModel):
    target_sound: str
    target_word: str
    recording_url: str
    transcription: str
    ai_assessment: AiAssessment
    therapist_assessment: Optional[TherapistAssessment] = None


class NotesArguments(BaseModel):
    notes: str
