"""Unit tests for session entities."""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from src.domain.entities import (
    AiAssessment,
    BreakRecord,
    BreakType,
    IgnoredReason,
    InvalidStatusTransition,
    OperationResult,
    SessionAggregate,
    SessionSnapshot,
    SessionStatus,
    SpeechSample,
    TherapySession,
    format_time,
)


class TestSessionStatus:
    """Tests for SessionStatus enum."""

    def test_session_status_values(self):
        """Test that session statuses have correct string values."""
        assert SessionStatus.SCHEDULED.value == "scheduled"
        assert SessionStatus.IN_PROGRESS.value == "in-progress"
        assert SessionStatus.COMPLETED.value == "completed"
        assert SessionStatus.CANCELLED.value == "cancelled"

    def test_session_status_count(self):
        """Test that there are exactly 4 session statuses."""
        assert len(SessionStatus) == 4


class TestTherapySession:
    """Tests for TherapySession entity."""

    def test_session_creation_minimal(self):
        """Test creating a session with minimal required fields."""
        session = TherapySession(
            id="sess-1",
            patient_id="patient-123",
            therapist_id="therapist-456",
        )

        assert session.duration == 45
        assert session.actual_duration == 0
        assert session.status == SessionStatus.SCHEDULED
        assert session.tokens_earned == 0
        assert session.activity_ids == []
        assert session.notes == ""
        assert session.date.tzinfo is not None

    def test_session_validation_duration_minimum(self):
        """Test that planned duration must be positive."""
        with pytest.raises(Exception):  # Pydantic validation error
            TherapySession(id="s", patient_id="p", therapist_id="t", duration=0)

    def test_forward_transitions(self):
        """Test the scheduled -> in-progress -> completed path."""
        session = TherapySession(id="s", patient_id="p", therapist_id="t")

        session.transition_to(SessionStatus.IN_PROGRESS)
        assert session.status == SessionStatus.IN_PROGRESS

        session.transition_to(SessionStatus.COMPLETED)
        assert session.status == SessionStatus.COMPLETED

    def test_in_progress_can_be_cancelled(self):
        session = TherapySession(id="s", patient_id="p", therapist_id="t")
        session.transition_to(SessionStatus.IN_PROGRESS)
        session.transition_to(SessionStatus.CANCELLED)
        assert session.status == SessionStatus.CANCELLED

    @pytest.mark.parametrize(
        "start,target",
        [
            (SessionStatus.SCHEDULED, SessionStatus.COMPLETED),
            (SessionStatus.IN_PROGRESS, SessionStatus.SCHEDULED),
            (SessionStatus.COMPLETED, SessionStatus.IN_PROGRESS),
            (SessionStatus.CANCELLED, SessionStatus.COMPLETED),
        ],
    )
    def test_rejected_transitions(self, start, target):
        """Test that status never moves backwards or skips a state."""
        session = TherapySession(id="s", patient_id="p", therapist_id="t", status=start)

        with pytest.raises(InvalidStatusTransition, match="Cannot move session"):
            session.transition_to(target)
        assert session.status == start

    def test_touch_updates_timestamp(self):
        session = TherapySession(id="s", patient_id="p", therapist_id="t")
        later = datetime(2030, 1, 1, tzinfo=timezone.utc)

        session.touch(later)

        assert session.updated_at == later


class TestChildRecords:
    """Tests for child record entities."""

    def test_break_is_open_until_ended(self):
        record = BreakRecord(id="b1", session_id="s", break_type=BreakType.REQUESTED)
        assert record.is_open

        record.end_time = datetime.now(timezone.utc)
        assert not record.is_open

    def test_break_type_parsed_from_string(self):
        record = BreakRecord(id="b1", session_id="s", break_type="emergency")
        assert record.break_type == BreakType.EMERGENCY

    def test_speech_sample_defaults_therapist_assessment(self):
        sample = SpeechSample(
            id="sp1",
            session_id="s",
            activity_id="a",
            target_sound="s",
            target_word="sun",
            recording_url="recordings/sp1.webm",
            transcription="sun",
            ai_assessment=AiAssessment(recognized=True, clarity=3, target_sound_accuracy=90),
        )

        assert sample.therapist_assessment.clarity == 0
        assert sample.therapist_assessment.target_sound_accuracy == 0
        assert sample.therapist_assessment.notes == ""

    def test_ai_assessment_clarity_range(self):
        with pytest.raises(Exception):  # Pydantic validation error
            AiAssessment(clarity=4)

    def test_assignment_is_validated(self):
        record = BreakRecord(id="b1", session_id="s", break_type=BreakType.REQUESTED)

        with pytest.raises(ValidationError):
            record.effectiveness = 9
        assert record.effectiveness == 0

    def test_session_tokens_cannot_go_negative(self):
        session = TherapySession(id="s", patient_id="p", therapist_id="t")

        with pytest.raises(ValidationError):
            session.tokens_earned = -5
        assert session.tokens_earned == 0


class TestSessionAggregate:
    """Tests for the SessionAggregate document."""

    def test_aggregate_exposes_root_fields(self):
        session = TherapySession(
            id="sess-9",
            patient_id="p",
            therapist_id="t",
            status=SessionStatus.IN_PROGRESS,
        )
        aggregate = SessionAggregate(session=session)

        assert aggregate.id == "sess-9"
        assert aggregate.status == SessionStatus.IN_PROGRESS
        assert aggregate.is_in_progress
        assert aggregate.activities == {}


class TestResults:
    """Tests for controller result entities."""

    def test_ok_result_is_truthy(self):
        result = OperationResult.ok("rec-1")
        assert result
        assert result.record_id == "rec-1"
        assert result.reason is None

    def test_ignored_result_is_falsy(self):
        result = OperationResult.ignored(IgnoredReason.NO_ACTIVITY)
        assert not result
        assert result.reason == IgnoredReason.NO_ACTIVITY

    @pytest.mark.parametrize(
        "seconds,expected",
        [(0, "0:00"), (59, "0:59"), (60, "1:00"), (2700, "45:00"), (-5, "0:00")],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_snapshot_formats_times(self):
        snapshot = SessionSnapshot(elapsed_time=75, remaining_time=2625)
        assert snapshot.formatted_remaining == "43:45"
