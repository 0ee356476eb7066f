"""Append and close rules for the records inside a session aggregate."""

import logging
from datetime import datetime
from typing import Optional

from ..entities.records import (
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
    utc_now,
)
from ..entities.therapy_session import SessionAggregate
from ..interfaces.id_generator import IdGenerator

logger = logging.getLogger(__name__)

FORCE_CLOSE_ENGAGEMENT = 3

NOTE_NEW_ACTIVITY = "Activity ended before completion to start new activity"
NOTE_BREAK = "Activity paused for break"
NOTE_SESSION_ENDED = "Session ended before activity completion"
NOTE_SESSION_CANCELLED = "Session cancelled before activity completion"
NOTE_BREAK_SESSION_ENDED = "Session finished during break"


def _whole_seconds(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds()))


class SessionJournal:
    """
    Mutation rules over the child records of a ``SessionAggregate``.

    The journal does not check the session status; callers decide whether a
    mutation is allowed. It does enforce the single-open-record rules:
    opening an activity or a break always goes through
    ``force_close_activity`` first.
    """

    def __init__(self, id_generator: IdGenerator):
        self.id_generator = id_generator

    # ===== Lookups =====

    @staticmethod
    def open_activity_record(aggregate: SessionAggregate) -> Optional[ActivityRecord]:
        """Return the open activity, if any."""
        for activity_id in reversed(aggregate.session.activity_ids):
            activity = aggregate.activities[activity_id]
            if activity.is_open:
                return activity
        return None

    @staticmethod
    def latest_break(aggregate: SessionAggregate) -> Optional[BreakRecord]:
        if not aggregate.session.break_ids:
            return None
        return aggregate.breaks[aggregate.session.break_ids[-1]]

    @staticmethod
    def ordered_activities(aggregate: SessionAggregate) -> list[ActivityRecord]:
        return [aggregate.activities[i] for i in aggregate.session.activity_ids]

    # ===== Activities =====

    def open_activity(
        self,
        aggregate: SessionAggregate,
        activity_type: str,
        target_sounds: list[str],
        target_patterns: list[str],
        difficulty: int,
        now: Optional[datetime] = None,
    ) -> ActivityRecord:
        """Append a new open activity, force-closing any activity still open."""
        now = now or utc_now()
        self.force_close_activity(aggregate, NOTE_NEW_ACTIVITY, now)

        activity = ActivityRecord(
            id=self.id_generator.generate_id(),
            session_id=aggregate.session.id,
            activity_type=activity_type,
            start_time=now,
            difficulty=difficulty,
            target_sounds=list(target_sounds),
            target_patterns=list(target_patterns),
        )
        aggregate.activities[activity.id] = activity
        aggregate.session.activity_ids.append(activity.id)
        aggregate.session.touch(now)
        return activity

    def close_activity(
        self,
        aggregate: SessionAggregate,
        engagement_level: int,
        success_rate: float,
        tokens_earned: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[ActivityRecord]:
        """
        Close the open activity with the given scores.

        This is the only place the session token counter changes: the
        activity's tokens are added to the running total, which is never
        recomputed from the activity records.

        Returns:
            The closed activity, or None if no activity was open.
        """
        activity = self.open_activity_record(aggregate)
        if activity is None:
            return None

        now = now or utc_now()
        activity.end_time = now
        activity.duration = _whole_seconds(activity.start_time, now)
        activity.engagement_level = engagement_level
        activity.success_rate = success_rate
        activity.tokens_earned = tokens_earned
        if notes:
            activity.notes = notes

        aggregate.session.tokens_earned += tokens_earned
        aggregate.session.touch(now)
        logger.debug(
            f"Activity {activity.id} closed after {activity.duration}s "
            f"with {tokens_earned} tokens"
        )
        return activity

    def force_close_activity(
        self,
        aggregate: SessionAggregate,
        note: str,
        now: Optional[datetime] = None,
    ) -> Optional[ActivityRecord]:
        """
        End a superseded activity with no reward.

        Used when a new activity, a break or the end of the session takes
        over from an activity that was never finished.
        """
        activity = self.close_activity(
            aggregate,
            engagement_level=FORCE_CLOSE_ENGAGEMENT,
            success_rate=0,
            tokens_earned=0,
            notes=note,
            now=now,
        )
        if activity is not None:
            logger.info(f"Activity {activity.id} force-closed: {note}")
        return activity

    # ===== Breaks =====

    def open_break(
        self,
        aggregate: SessionAggregate,
        break_type: BreakType,
        now: Optional[datetime] = None,
    ) -> BreakRecord:
        """Append a new open break after force-closing any open activity.

        A break that is still open is closed first so that at most one break
        is ever open.
        """
        now = now or utc_now()
        self.force_close_activity(aggregate, NOTE_BREAK, now)
        self.close_break(aggregate, effectiveness=0, now=now)

        break_record = BreakRecord(
            id=self.id_generator.generate_id(),
            session_id=aggregate.session.id,
            start_time=now,
            break_type=BreakType(break_type),
        )
        aggregate.breaks[break_record.id] = break_record
        aggregate.session.break_ids.append(break_record.id)
        aggregate.session.touch(now)
        return break_record

    def close_break(
        self,
        aggregate: SessionAggregate,
        effectiveness: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[BreakRecord]:
        """Close the most recently started break if it is still open."""
        break_record = self.latest_break(aggregate)
        if break_record is None or not break_record.is_open:
            return None

        now = now or utc_now()
        break_record.end_time = now
        break_record.duration = _whole_seconds(break_record.start_time, now)
        break_record.effectiveness = effectiveness
        if notes:
            break_record.notes = notes
        aggregate.session.touch(now)
        return break_record

    # ===== Append-only records =====

    def append_intervention(
        self,
        aggregate: SessionAggregate,
        intervention_type: InterventionType,
        effectiveness: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Intervention]:
        """Log an intervention against the open activity."""
        activity = self.open_activity_record(aggregate)
        if activity is None:
            return None

        now = now or utc_now()
        intervention = Intervention(
            id=self.id_generator.generate_id(),
            activity_id=activity.id,
            intervention_type=InterventionType(intervention_type),
            timestamp=now,
            effectiveness=effectiveness,
            notes=notes or "",
        )
        aggregate.interventions[intervention.id] = intervention
        activity.intervention_ids.append(intervention.id)
        aggregate.session.touch(now)
        return intervention

    def append_achievement(
        self,
        aggregate: SessionAggregate,
        achievement_type: AchievementType,
        description: str,
        reward_given: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Achievement:
        now = now or utc_now()
        achievement = Achievement(
            id=self.id_generator.generate_id(),
            session_id=aggregate.session.id,
            achievement_type=AchievementType(achievement_type),
            description=description,
            timestamp=now,
            reward_given=reward_given,
            notes=notes or "",
        )
        aggregate.achievements[achievement.id] = achievement
        aggregate.session.achievement_ids.append(achievement.id)
        aggregate.session.touch(now)
        return achievement

    def append_speech_sample(
        self,
        aggregate: SessionAggregate,
        target_sound: str,
        target_word: str,
        recording_url: str,
        transcription: str,
        ai_assessment: AiAssessment,
        therapist_assessment: Optional[TherapistAssessment] = None,
        now: Optional[datetime] = None,
    ) -> Optional[SpeechSample]:
        """Store a speech sample and reference it from the session and the open activity."""
        activity = self.open_activity_record(aggregate)
        if activity is None:
            return None

        now = now or utc_now()
        sample = SpeechSample(
            id=self.id_generator.generate_id(),
            session_id=aggregate.session.id,
            activity_id=activity.id,
            target_sound=target_sound,
            target_word=target_word,
            recording_url=recording_url,
            transcription=transcription,
            ai_assessment=ai_assessment,
            therapist_assessment=therapist_assessment or TherapistAssessment(),
            timestamp=now,
        )
        aggregate.speech_samples[sample.id] = sample
        aggregate.session.speech_sample_ids.append(sample.id)
        activity.speech_sample_ids.append(sample.id)
        aggregate.session.touch(now)
        return sample

    # ===== Summaries =====

    def compute_overall_engagement(self, aggregate: SessionAggregate) -> float:
        """Mean engagement of closed activities that were actually scored."""
        levels = [
            activity.engagement_level
            for activity in self.ordered_activities(aggregate)
            if not activity.is_open and activity.engagement_level > 0
        ]
        if not levels:
            return 0
        return round(sum(levels) / len(levels), 2)
