"""Tests for the value models: ProposedEvent, BlockedTime, ScheduledBlock."""

from datetime import datetime, time, timezone

import pytest
from pydantic import ValidationError

from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.scheduled_block import ScheduledBlock
from weekgrid.models.time_key import Weekday


class TestProposedEvent:
    def test_parses_string_inputs(self):
        event = ProposedEvent(day="tuesday", start_time="7:30", duration_minutes=45, name="Run")
        assert event.day is Weekday.TUE
        assert event.start_time == time(7, 30)
        assert event.locked is False
        assert event.time_key == "Tue 07:30"
        assert event.column_index == 1

    def test_accepts_seconds(self):
        event = ProposedEvent(day=Weekday.MON, start_time="09:00:15", duration_minutes=0, name="Ping")
        assert event.start_time == time(9, 0, 15)

    def test_rejects_negative_duration(self):
        with pytest.raises(ValidationError):
            ProposedEvent(day="MON", start_time="09:00", duration_minutes=-5, name="Bad")

    def test_rejects_unknown_day(self):
        with pytest.raises(ValidationError):
            ProposedEvent(day="Someday", start_time="09:00", duration_minutes=30, name="Bad")

    def test_rejects_malformed_time(self):
        with pytest.raises(ValidationError):
            ProposedEvent(day="MON", start_time="25:00", duration_minutes=30, name="Bad")

    def test_is_immutable(self):
        event = ProposedEvent(day="MON", start_time="09:00", duration_minutes=30, name="Gym")
        with pytest.raises(ValidationError):
            event.name = "Other"


class TestBlockedTime:
    def test_empty_description_defaults_to_blocked(self):
        blocked = BlockedTime(
            start=datetime(2024, 1, 1, 14), end=datetime(2024, 1, 1, 16), description="", column_index=0
        )
        assert blocked.description == "Blocked"

    def test_description_omitted(self):
        blocked = BlockedTime(start=datetime(2024, 1, 1, 14), end=datetime(2024, 1, 1, 16), column_index=0)
        assert blocked.description == "Blocked"

    def test_overlap_is_inclusive(self):
        blocked = BlockedTime(start=datetime(2024, 1, 1, 14), end=datetime(2024, 1, 1, 16), column_index=0)
        assert blocked.overlaps(datetime(2024, 1, 1, 16), datetime(2024, 1, 1, 17)) is True
        assert blocked.overlaps(datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 14)) is True
        assert blocked.overlaps(datetime(2024, 1, 1, 15), datetime(2024, 1, 1, 15, 30)) is True
        assert blocked.overlaps(datetime(2024, 1, 1, 16, 1), datetime(2024, 1, 1, 17)) is False

    def test_column_range_validated(self):
        with pytest.raises(ValidationError):
            BlockedTime(start=datetime(2024, 1, 1, 14), end=datetime(2024, 1, 1, 16), column_index=7)


class TestScheduledBlock:
    def _block(self, column=0):
        return ScheduledBlock(
            start=datetime(2024, 1, 1, 9),
            end=datetime(2024, 1, 1, 10),
            activity_name="Gym",
            locked=True,
            column_index=column,
        )

    def test_overlap_without_column(self):
        block = self._block()
        assert block.overlaps(datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11)) is True
        assert block.overlaps(datetime(2024, 1, 1, 11), datetime(2024, 1, 1, 12)) is False

    def test_overlap_with_column_filters_other_columns(self):
        block = self._block(column=0)
        assert block.overlaps(datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10), 0) is True
        assert block.overlaps(datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 10), 1) is False

    def test_timezone_aware_times_rejected(self):
        with pytest.raises(ValidationError):
            ScheduledBlock(
                start=datetime(2024, 1, 1, 9, tzinfo=timezone.utc),
                end=datetime(2024, 1, 1, 10, tzinfo=timezone.utc),
                activity_name="Gym",
                column_index=0,
            )


def test_blocked_time_rejects_timezone_aware_times():
    with pytest.raises(ValidationError):
        BlockedTime(start="2024-01-01T14:00:00Z", end="2024-01-01T16:00:00Z", column_index=0)
