"""Session Controller owning the lifecycle of the current therapy session."""

import logging
from datetime import datetime
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..domain.entities import (
    AchievementType,
    ActivityRecord,
    AiAssessment,
    BreakType,
    IgnoredReason,
    InterventionType,
    OperationResult,
    SessionAggregate,
    SessionSnapshot,
    SessionStatus,
    TherapistAssessment,
    TherapySession,
)
from ..domain.entities.arguments import (
    AchievementArguments,
    ActivityScoreArguments,
    ActivityStartArguments,
    BreakScoreArguments,
    BreakStartArguments,
    InterventionArguments,
    NotesArguments,
    SessionStartArguments,
    SpeechSampleArguments,
)
from ..domain.entities.records import utc_now
from ..domain.interfaces.elapsed_clock import ElapsedClock
from ..domain.interfaces.id_generator import IdGenerator
from ..domain.services.session_journal import (
    NOTE_BREAK_SESSION_ENDED,
    NOTE_SESSION_CANCELLED,
    NOTE_SESSION_ENDED,
    SessionJournal,
)
from ..infrastructure.session_persistence import SessionPersistence

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "speech_therapy_current_session"
DEFAULT_SESSION_DURATION = 45

ArgsT = TypeVar("ArgsT", bound=BaseModel)


class SessionController:
    """
    Controller for the current therapy session.

    This controller is injected with its clock, identifier generator and
    persistence adapter, and is the only code that mutates the session
    aggregate. Every mutating operation either applies and writes the full
    aggregate through to storage, or is ignored and returns an
    ``OperationResult`` naming the missing precondition or the rejected
    arguments. Arguments are checked before anything is changed, so an
    ignored call leaves memory and storage exactly as they were. Nothing
    here raises to the caller.

    Arming the clock needs a running asyncio event loop, so the controller is
    constructed and driven from inside one.
    """

    def __init__(
        self,
        persistence: SessionPersistence,
        clock: ElapsedClock,
        id_generator: IdGenerator,
        storage_key: str = DEFAULT_STORAGE_KEY,
        default_duration: int = DEFAULT_SESSION_DURATION,
    ):
        """
        Initialize the controller and resume any persisted in-progress session.

        Args:
            persistence: Adapter used to load and write the session aggregate
            clock: Elapsed-time clock, armed while a session is in progress
            id_generator: Source of identifiers for new records
            storage_key: Key the aggregate is stored under
            default_duration: Planned session length in minutes when none is given
        """
        self.persistence = persistence
        self.clock = clock
        self.id_generator = id_generator
        self.journal = SessionJournal(id_generator)
        self.storage_key = storage_key
        self.default_duration = default_duration

        self._aggregate: Optional[SessionAggregate] = None
        self._resume()

        logger.info("SessionController initialized")

    # ===== Lifecycle =====

    def _resume(self, now: Optional[datetime] = None) -> None:
        """Adopt a persisted in-progress session and seed the clock from wall time."""
        stored = self.persistence.load(self.storage_key, SessionAggregate)
        if stored is None or not stored.is_in_progress:
            return

        now = now or utc_now()
        self._aggregate = stored
        self.clock.reset(int((now - stored.session.date).total_seconds()))
        self.clock.start()
        logger.info(
            f"Resumed session {stored.id} at {self.clock.elapsed_seconds}s elapsed"
        )

    def close(self) -> None:
        """Disarm the clock. The session itself is left as it is in storage."""
        self.clock.stop()
        logger.info("SessionController closed")

    async def __aenter__(self) -> "SessionController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _persist(self) -> None:
        if self._aggregate is not None:
            self.persistence.save(self.storage_key, self._aggregate)

    def _ignored(self, operation: str, reason: IgnoredReason) -> OperationResult:
        logger.debug(f"{operation} ignored: {reason.value}")
        return OperationResult.ignored(reason)

    def _active_aggregate(self, operation: str):
        """Return ``(aggregate, None)`` or ``(None, ignored result)``."""
        if self._aggregate is None:
            return None, self._ignored(operation, IgnoredReason.NO_SESSION)
        if not self._aggregate.is_in_progress:
            return None, self._ignored(operation, IgnoredReason.SESSION_NOT_ACTIVE)
        return self._aggregate, None

    def _parse(self, operation: str, model: Type[ArgsT], **values):
        """Return ``(arguments, None)`` or ``(None, ignored result)``."""
        try:
            return model(**values), None
        except ValidationError as e:
            logger.warning(
                f"{operation} ignored: invalid arguments "
                f"({e.error_count()} errors: {e.errors(include_url=False)})"
            )
            return None, OperationResult.ignored(IgnoredReason.INVALID_ARGUMENT)

    # ===== Session operations =====

    def start_session(
        self,
        patient_id: str,
        therapist_id: str,
        planned_duration: Optional[int] = None,
    ) -> OperationResult:
        """Start a new in-progress session, superseding any current one."""
        args, ignored = self._parse(
            "start_session",
            SessionStartArguments,
            patient_id=patient_id,
            therapist_id=therapist_id,
            planned_duration=planned_duration,
        )
        if ignored is not None:
            return ignored

        if self._aggregate is not None and self._aggregate.is_in_progress:
            logger.warning(
                f"Session {self._aggregate.id} superseded by a new session "
                f"without being ended"
            )

        if args.planned_duration is None:
            duration = self.default_duration
        else:
            duration = args.planned_duration

        now = utc_now()
        session = TherapySession(
            id=self.id_generator.generate_id(),
            patient_id=args.patient_id,
            therapist_id=args.therapist_id,
            date=now,
            duration=duration,
            created_at=now,
            updated_at=now,
        )
        session.transition_to(SessionStatus.IN_PROGRESS)
        self._aggregate = SessionAggregate(session=session)

        self.clock.stop()
        self.clock.reset(0)
        self.clock.start()

        self._persist()
        logger.info(
            f"Started session {session.id} for patient {patient_id} "
            f"({session.duration} min planned)"
        )
        return OperationResult.ok(session.id)

    def end_session(self) -> OperationResult:
        """Complete the session, force-closing any open activity or break first."""
        return self._finish_session(SessionStatus.COMPLETED, NOTE_SESSION_ENDED, "end_session")

    def cancel_session(self, notes: Optional[str] = None) -> OperationResult:
        """Cancel the session, force-closing any open activity or break first."""
        return self._finish_session(
            SessionStatus.CANCELLED, NOTE_SESSION_CANCELLED, "cancel_session", notes
        )

    def _finish_session(
        self,
        status: SessionStatus,
        activity_note: str,
        operation: str,
        notes: Optional[str] = None,
    ) -> OperationResult:
        aggregate, ignored = self._active_aggregate(operation)
        if ignored is not None:
            return ignored

        now = utc_now()
        self.journal.force_close_activity(aggregate, activity_note, now)
        self.journal.close_break(
            aggregate, effectiveness=0, notes=NOTE_BREAK_SESSION_ENDED, now=now
        )

        session = aggregate.session
        session.transition_to(status)
        session.actual_duration = self.clock.elapsed_seconds // 60
        session.overall_engagement = self.journal.compute_overall_engagement(aggregate)
        if notes:
            session.notes = notes
        session.touch(now)

        self.clock.stop()
        self._persist()
        logger.info(
            f"Session {session.id} {status.value} after {session.actual_duration} min "
            f"with {session.tokens_earned} tokens"
        )
        return OperationResult.ok(session.id)

    def update_notes(self, notes: str) -> OperationResult:
        aggregate, ignored = self._active_aggregate("update_notes")
        if ignored is not None:
            return ignored
        args, ignored = self._parse("update_notes", NotesArguments, notes=notes)
        if ignored is not None:
            return ignored

        aggregate.session.notes = args.notes
        aggregate.session.touch()
        self._persist()
        return OperationResult.ok(aggregate.id)

    # ===== Activity operations =====

    def start_activity(
        self,
        activity_type: str,
        target_sounds: list[str],
        target_patterns: list[str],
        difficulty: int,
    ) -> OperationResult:
        aggregate, ignored = self._active_aggregate("start_activity")
        if ignored is not None:
            return ignored
        args, ignored = self._parse(
            "start_activity",
            ActivityStartArguments,
            activity_type=activity_type,
            target_sounds=target_sounds,
            target_patterns=target_patterns,
            difficulty=difficulty,
        )
        if ignored is not None:
            return ignored

        activity = self.journal.open_activity(
            aggregate, args.activity_type, args.target_sounds, args.target_patterns, args.difficulty
        )
        self._persist()
        logger.info(f"Started activity {activity.activity_type} ({activity.id})")
        return OperationResult.ok(activity.id)

    def end_activity(
        self,
        engagement_level: int,
        success_rate: float,
        tokens_earned: int,
        notes: Optional[str] = None,
    ) -> OperationResult:
        aggregate, ignored = self._active_aggregate("end_activity")
        if ignored is not None:
            return ignored
        args, ignored = self._parse(
            "end_activity",
            ActivityScoreArguments,
            engagement_level=engagement_level,
            success_rate=success_rate,
            tokens_earned=tokens_earned,
            notes=notes,
        )
        if ignored is not None:
            return ignored

        activity = self.journal.close_activity(
            aggregate, args.engagement_level, args.success_rate, args.tokens_earned, args.notes
        )
        if activity is None:
            return self._ignored("end_activity", IgnoredReason.NO_ACTIVITY)

        self._persist()
        return OperationResult.ok(activity.id)

    # ===== Break operations =====

    def start_break(self, break_type: BreakType) -> OperationResult:
        aggregate, ignored = self._active_aggregate("start_break")
        if ignored is not None:
            return ignored
        args, ignored = self._parse("start_break", BreakStartArguments, break_type=break_type)
        if ignored is not None:
            return ignored

        break_record = self.journal.open_break(aggregate, args.break_type)
        self._persist()
        logger.info(f"Started {break_record.break_type.value} break ({break_record.id})")
        return OperationResult.ok(break_record.id)

    def end_break(self, effectiveness: int, notes: Optional[str] = None) -> OperationResult:
        aggregate, ignored = self._active_aggregate("end_break")
        if ignored is not None:
            return ignored
        args, ignored = self._parse(
            "end_break", BreakScoreArguments, effectiveness=effectiveness, notes=notes
        )
        if ignored is not None:
            return ignored

        break_record = self.journal.close_break(aggregate, args.effectiveness, args.notes)
        if break_record is None:
            return self._ignored("end_break", IgnoredReason.NO_BREAK)

        self._persist()
        return OperationResult.ok(break_record.id)

    # ===== Append-only records =====

    def record_intervention(
        self,
        intervention_type: InterventionType,
        effectiveness: int,
        notes: Optional[str] = None,
    ) -> OperationResult:
        aggregate, ignored = self._active_aggregate("record_intervention")
        if ignored is not None:
            return ignored
        args, ignored = self._parse(
            "record_intervention",
            InterventionArguments,
            intervention_type=intervention_type,
            effectiveness=effectiveness,
            notes=notes,
        )
        if ignored is not None:
            return ignored

        intervention = self.journal.append_intervention(
            aggregate, args.intervention_type, args.effectiveness, args.notes
        )
        if intervention is None:
            return self._ignored("record_intervention", IgnoredReason.NO_ACTIVITY)

        self._persist()
        return OperationResult.ok(intervention.id)

    def record_achievement(
        self,
        achievement_type: AchievementType,
        description: str,
        reward_given: str,
        notes: Optional[str] = None,
    ) -> OperationResult:
        aggregate, ignored = self._active_aggregate("record_achievement")
        if ignored is not None:
            return ignored
        args, ignored = self._parse(
            "record_achievement",
            AchievementArguments,
            achievement_type=achievement_type,
            description=description,
            reward_given=reward_given,
            notes=notes,
        )
        if ignored is not None:
            return ignored

        achievement = self.journal.append_achievement(
            aggregate, args.achievement_type, args.description, args.reward_given, args.notes
        )
        self._persist()
        return OperationResult.ok(achievement.id)

    def record_speech_sample(
        self,
        target_sound: str,
        target_word: str,
        recording_url: str,
        transcription: str,
        ai_assessment: AiAssessment,
        therapist_assessment: Optional[TherapistAssessment] = None,
    ) -> OperationResult:
        aggregate, ignored = self._active_aggregate("record_speech_sample")
        if ignored is not None:
            return ignored
        args, ignored = self._parse(
            "record_speech_sample",
            SpeechSampleArguments,
            target_sound=target_sound,
            target_word=target_word,
            recording_url=recording_url,
            transcription=transcription,
            ai_assessment=ai_assessment,
            therapist_assessment=therapist_assessment,
        )
        if ignored is not None:
            return ignored

        sample = self.journal.append_speech_sample(
            aggregate,
            args.target_sound,
            args.target_word,
            args.recording_url,
            args.transcription,
            args.ai_assessment,
            args.therapist_assessment,
        )
        if sample is None:
            return self._ignored("record_speech_sample", IgnoredReason.NO_ACTIVITY)

        self._persist()
        return OperationResult.ok(sample.id)

    # ===== Derived state =====

    @property
    def aggregate(self) -> Optional[SessionAggregate]:
        return self._aggregate

    @property
    def current_session(self) -> Optional[TherapySession]:
        return self._aggregate.session if self._aggregate else None

    @property
    def current_activity(self) -> Optional[ActivityRecord]:
        if self._aggregate is None:
            return None
        return self.journal.open_activity_record(self._aggregate)

    @property
    def is_session_active(self) -> bool:
        return self._aggregate is not None and self._aggregate.is_in_progress

    @property
    def is_on_break(self) -> bool:
        if self._aggregate is None:
            return False
        latest = self.journal.latest_break(self._aggregate)
        return latest is not None and latest.is_open

    @property
    def elapsed_time(self) -> int:
        return self.clock.elapsed_seconds

    @property
    def remaining_time(self) -> int:
        if self._aggregate is None:
            return 0
        return max(0, self._aggregate.session.duration * 60 - self.clock.elapsed_seconds)

    def snapshot(self) -> SessionSnapshot:
        """Copy of the derived state, detached from the live aggregate."""
        session = self.current_session
        activity = self.current_activity
        return SessionSnapshot(
            current_session=session.model_copy(deep=True) if session else None,
            current_activity=activity.model_copy(deep=True) if activity else None,
            is_session_active=self.is_session_active,
            is_on_break=self.is_on_break,
            elapsed_time=self.elapsed_time,
            remaining_time=self.remaining_time,
        )
