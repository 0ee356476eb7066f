"""
End-to-end tests for a therapy session journey.

These tests build the controller the way the application does, through
``build_session_controller``, and cover:
1. A full session: activity, intervention, scored close, tokens
2. Activities superseded by new activities and breaks
3. Calls made before any session exists
4. Reloading an in-progress session from durable storage
"""

import logging

import pytest

from src.application.bootstrap import build_session_controller
from src.application.config import Settings
from src.domain.entities import AiAssessment, SessionAggregate, SessionStatus
from src.infrastructure.file_key_value_store import FileKeyValueStore
from src.infrastructure.local_key_value_store import LocalKeyValueStore

logger = logging.getLogger(__name__)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing the file backend at a temporary directory."""
    return Settings(
        _env_file=None,
        storage_backend="file",
        storage_dir=str(tmp_path / "store"),
        tick_interval=3600,
    )


def open_activities(controller):
    return [a for a in controller.aggregate.activities.values() if a.end_time is None]


@pytest.mark.asyncio
async def test_quest_session_earns_tokens(settings):
    """Start session, run one activity with an intervention, end it with tokens."""
    async with build_session_controller(settings, store=LocalKeyValueStore()) as controller:
        controller.start_session("patient-1", "therapist-1", 45)
        controller.start_activity("Quest", ["s"], ["stopping"], 2)
        intervention = controller.record_intervention("attention", 3)
        controller.end_activity(4, 80, 3)

        assert intervention.applied
        assert controller.current_session.tokens_earned == 3
        assert open_activities(controller) == []
        assert controller.remaining_time == 45 * 60


@pytest.mark.asyncio
async def test_new_activity_supersedes_unfinished_one(settings):
    async with build_session_controller(settings, store=LocalKeyValueStore()) as controller:
        controller.start_session("patient-1", "therapist-1")
        first = controller.start_activity("A", [], [], 1)
        second = controller.start_activity("B", [], [], 1)

        remaining_open = open_activities(controller)
        superseded = controller.aggregate.activities[first.record_id]
        assert [a.id for a in remaining_open] == [second.record_id]
        assert superseded.tokens_earned == 0
        assert superseded.notes == "Activity ended before completion to start new activity"


@pytest.mark.asyncio
async def test_break_closes_open_activity(settings):
    async with build_session_controller(settings, store=LocalKeyValueStore()) as controller:
        controller.start_session("patient-1", "therapist-1")
        activity = controller.start_activity("A", [], [], 1)

        controller.start_break("requested")

        closed = controller.aggregate.activities[activity.record_id]
        open_breaks = [b for b in controller.aggregate.breaks.values() if b.end_time is None]
        assert closed.end_time is not None
        assert closed.tokens_earned == 0
        assert len(open_breaks) == 1
        assert open_breaks[0].break_type.value == "requested"
        assert controller.is_on_break


def test_end_activity_without_session(settings):
    """Calling end_activity before any session does nothing and raises nothing."""
    store = LocalKeyValueStore()
    controller = build_session_controller(settings, store=store)

    result = controller.end_activity(4, 80, 3)

    assert not result.applied
    assert controller.current_session is None
    assert store.get_all_items() == {}


@pytest.mark.asyncio
async def test_tokens_sum_over_interleaved_operations(settings):
    async with build_session_controller(settings, store=LocalKeyValueStore()) as controller:
        controller.start_session("patient-1", "therapist-1")
        awarded = [2, 0, 5, 1]
        for index, tokens in enumerate(awarded):
            controller.start_activity(f"Activity {index}", ["r"], [], 2)
            controller.record_intervention("motivation", 4)
            controller.record_speech_sample("r", "red", f"rec-{index}", "wed", AiAssessment())
            controller.end_activity(4, 60, tokens)
            controller.start_break("scheduled")
            controller.end_break(4)
        controller.start_activity("Unfinished", [], [], 1)
        controller.end_session()

        assert controller.current_session.tokens_earned == sum(awarded)
        assert controller.current_session.status == SessionStatus.COMPLETED


@pytest.mark.asyncio
async def test_in_progress_session_survives_reload(settings):
    """Persist to disk, rebuild the controller, and continue the same session."""
    async with build_session_controller(settings) as controller:
        controller.start_session("patient-1", "therapist-1", 30)
        controller.start_activity("Quest", ["s"], [], 2)
        controller.record_achievement("milestone", "First word", "sticker")
        before = controller.aggregate.model_dump()

    on_disk = FileKeyValueStore(settings.storage_dir).get(settings.session_storage_key)
    assert SessionAggregate.model_validate_json(on_disk).model_dump() == before

    async with build_session_controller(settings) as resumed:
        assert resumed.aggregate.model_dump() == before
        assert resumed.current_activity.activity_type == "Quest"
        assert resumed.clock.is_running

        resumed.end_activity(5, 100, 4)
        resumed.end_session()

        assert resumed.current_session.tokens_earned == 4
        assert not resumed.clock.is_running

    async with build_session_controller(settings) as after_end:
        assert after_end.current_session is None
