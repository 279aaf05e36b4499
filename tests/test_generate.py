"""Tests for the generate-schedule use case."""

from datetime import datetime

import pytest

from weekgrid.engine.generate import (
    EMPTY_PLAN_MESSAGE,
    NOTHING_TO_PLACE_MESSAGE,
    UNPLACED_MESSAGE,
    GenerateSchedule,
    build_generation_message,
    collect_locked_events,
)
from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.schedule import Schedule
from weekgrid.models.scheduled_block import ScheduledBlock
from weekgrid.models.time_key import Weekday


@pytest.fixture
def generator(memory_store, solver):
    return GenerateSchedule(memory_store, solver)


def _locked_block(column, hour, name, minutes=60):
    start = datetime(2024, 1, 1 + column, hour)
    return ScheduledBlock(
        start=start,
        end=start.replace(hour=hour + minutes // 60, minute=minutes % 60),
        activity_name=name,
        locked=True,
        column_index=column,
    )


class TestCollectLockedEvents:
    def test_none_gives_nothing(self):
        assert collect_locked_events(None) == []

    def test_blocks_keep_duration(self):
        schedule = Schedule(1)
        schedule.add_locked_block(_locked_block(0, 9, "Gym", minutes=90))

        (event,) = collect_locked_events(schedule)

        assert event.day is Weekday.MON
        assert event.duration_minutes == 90
        assert event.locked is True
        assert event.name == "Gym"

    def test_key_only_locks_last_one_hour(self):
        schedule = Schedule(1)
        schedule.add_activity("Tue 18:00", "Choir")
        schedule.lock_slot_key("Tue 18:00")
        schedule.lock_slot_key("Wed 08:00")

        (event,) = collect_locked_events(schedule)

        assert event.time_key == "Tue 18:00"
        assert event.duration_minutes == 60

    def test_block_and_key_for_same_slot_are_deduplicated(self):
        schedule = Schedule(1)
        schedule.add_locked_block(_locked_block(0, 9, "Gym"))
        schedule.add_activity("Mon 09:00", "Gym")
        schedule.lock_slot_key("Mon 09:00")

        assert len(collect_locked_events(schedule)) == 1


class TestBuildGenerationMessage:
    def test_messages(self):
        assert build_generation_message(None) is not None
        assert build_generation_message(Schedule(1)) == EMPTY_PLAN_MESSAGE

        placed = Schedule(1)
        placed.add_activity("Mon 09:00", "Gym")
        assert build_generation_message(placed) is None

        placed.add_unplaced_activity("Lunch")
        assert build_generation_message(placed) == UNPLACED_MESSAGE


class TestGenerateSchedule:
    def test_nothing_to_place(self, generator, memory_store):
        result = generator.execute(1, proposals=[], fixed_activities="  ")

        assert result.schedule is None
        assert result.message == NOTHING_TO_PLACE_MESSAGE
        assert len(memory_store) == 0

    def test_places_and_saves_proposals(self, generator, memory_store, make_event):
        result = generator.execute(1, proposals=[make_event("Study", Weekday.WED, "10:00", 60)])

        assert result.message is None
        assert len(result.schedule.activities) == 1
        assert memory_store.get(1).activities == result.schedule.activities

    def test_fixed_activities_are_locked(self, generator):
        result = generator.execute(1, fixed_activities="Mon 09:00-10:00 Gym")

        assert result.schedule.activities == {"Mon 09:00": "Gym"}
        assert result.schedule.locked_slot_keys == {"Mon 09:00"}

    def test_existing_locks_are_kept(self, generator, memory_store, make_event):
        existing = Schedule(1)
        existing.add_locked_block(_locked_block(0, 9, "Gym"))
        existing.add_activity("Mon 09:00", "Gym")
        existing.lock_slot_key("Mon 09:00")
        memory_store.put(existing)

        result = generator.execute(1, proposals=[make_event("Run", Weekday.MON, "09:00", 60)])

        assert result.schedule.activities["Mon 09:00"] == "Gym"
        assert "Run" in result.schedule.activities.values()
        assert len(result.schedule.locked_blocks) == 1

    def test_stored_blocked_times_are_respected(self, generator, memory_store, make_event):
        existing = Schedule(1)
        away = BlockedTime(
            start=datetime(2024, 1, 1, 0),
            end=datetime(2024, 1, 2, 0),
            description="Away",
            column_index=0,
        )
        existing.add_blocked_time(away)
        memory_store.put(existing)

        result = generator.execute(1, proposals=[make_event("Lunch", Weekday.MON, "12:00", 60)])

        assert result.schedule.blocked_times == [away]
        assert result.schedule.unplaced_activities == ["Lunch"]
        assert result.message == EMPTY_PLAN_MESSAGE

    def test_partial_placement_message(self, generator, make_event):
        events = [make_event(f"Task {i}", Weekday.FRI, "12:00", 60) for i in range(25)]

        result = generator.execute(1, proposals=events)

        assert len(result.schedule.unplaced_activities) == 1
        assert result.message == UNPLACED_MESSAGE

    def test_schedule_type_is_recorded(self, generator, make_event):
        result = generator.execute(1, proposals=[make_event()], schedule_type="day")
        assert result.schedule.schedule_type == "day"
