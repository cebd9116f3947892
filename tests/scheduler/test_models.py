"""Tests for scheduler data models and the fixed catalogs."""

from course_scheduler.scheduler.constants import (
    DAYS,
    TIME_SLOTS,
    get_time_slot,
    get_time_slot_range,
)
from course_scheduler.scheduler.models import (
    Assignment,
    Classroom,
    Conflict,
    ConflictType,
    Day,
    ScheduleResult,
    ScheduleStatistics,
    Section,
    TimeSlot,
    UnassignedSection,
    UnscheduledReason,
)


class TestCatalogs:
    """Tests for the day and time slot catalogs."""

    def test_days_are_weekdays_in_order(self):
        assert [d.value for d in DAYS] == [
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
        ]

    def test_ten_time_slots(self):
        assert len(TIME_SLOTS) == 10
        assert [s.id for s in TIME_SLOTS] == list(range(1, 11))

    def test_time_slot_bounds(self):
        assert TIME_SLOTS[0].start == "08:00"
        assert TIME_SLOTS[0].end == "08:50"
        assert TIME_SLOTS[-1].start == "17:00"
        assert TIME_SLOTS[-1].end == "17:50"

    def test_time_slots_do_not_overlap(self):
        for earlier, later in zip(TIME_SLOTS, TIME_SLOTS[1:]):
            assert earlier.end < later.start

    def test_get_time_slot(self):
        assert get_time_slot(3) == TimeSlot(3, "10:00", "10:50")
        assert get_time_slot(11) is None

    def test_get_time_slot_range(self):
        assert get_time_slot_range(1) == "08:00 - 08:50"
        assert get_time_slot_range(99) == ""


class TestSection:
    """Tests for Section."""

    def test_from_dict_with_capacity_column(self):
        section = Section.from_dict(
            {
                "id": "CS101-1",
                "capacity": "35",
                "instructor_id": "I1",
                "course_code": "CS101",
                "semester": "Fall",
                "year": "2025",
            }
        )
        assert section.required_capacity == 35
        assert section.instructor_id == "I1"
        assert section.year == 2025

    def test_from_dict_empty_instructor_is_none(self):
        section = Section.from_dict({"id": "S1", "capacity": 10, "instructor_id": ""})
        assert section.instructor_id is None

    def test_instructor_display(self):
        assert Section("S1", 10, "I1", instructor_name="Ada").instructor_display == "Ada"
        assert Section("S1", 10, "I1").instructor_display == "I1"
        assert Section("S1", 10).instructor_display == "TBA"

    def test_sections_are_hashable(self):
        assert len({Section("S1", 10), Section("S1", 10)}) == 1


class TestClassroom:
    """Tests for Classroom."""

    def test_label(self):
        assert Classroom("R1", 30, "Main", "101").label == "Main 101"
        assert Classroom("R1", 30, "Gym").label == "Gym"

    def test_active_by_default(self):
        assert Classroom("R1", 30, "Main").is_active


class TestAssignment:
    """Tests for Assignment."""

    def test_key(self):
        assignment = Assignment(
            Section("S1", 10), Classroom("R1", 30, "Main"), Day.TUESDAY, TIME_SLOTS[1]
        )
        assert assignment.key == ("S1", "R1", Day.TUESDAY, 2)
        assert assignment.section_id == "S1"
        assert assignment.classroom_id == "R1"
        assert assignment.time_slot_id == 2

    def test_to_dict(self):
        assignment = Assignment(
            Section("S1", 10, "I1", course_code="CS101", instructor_name="Ada"),
            Classroom("R1", 30, "Main", "101"),
            Day.MONDAY,
            TIME_SLOTS[0],
        )
        data = assignment.to_dict()
        assert data["section_id"] == "S1"
        assert data["course_code"] == "CS101"
        assert data["instructor"] == "Ada"
        assert data["classroom_id"] == "R1"
        assert data["classroom"] == "Main 101"
        assert data["day"] == "Monday"
        assert data["time_slot_id"] == 1
        assert data["time"] == "08:00 - 08:50"


class TestResultModels:
    """Tests for result serialization."""

    def test_unassigned_to_dict(self):
        item = UnassignedSection(
            Section("S1", 10, course_code="CS101"),
            UnscheduledReason.NO_VALID_ASSIGNMENT,
            "No valid time slot and classroom combination available",
        )
        data = item.to_dict()
        assert data["reason_code"] == "no_valid_assignment"
        assert data["reason"] == "No valid time slot and classroom combination available"

    def test_conflict_to_dict(self):
        conflict = Conflict(ConflictType.INSTRUCTOR, "I1", Day.MONDAY, 1, ["S1", "S2"])
        data = conflict.to_dict()
        assert data["type"] == "instructor_conflict"
        assert data["sections"] == ["S1", "S2"]

    def test_scheduling_rate(self):
        stats = ScheduleStatistics(total_sections=4, scheduled=3, unscheduled=1)
        assert stats.to_dict()["scheduling_rate"] == 0.75
        assert ScheduleStatistics().to_dict()["scheduling_rate"] == 0.0

    def test_result_to_dict(self):
        result = ScheduleResult(success=True, semester="Fall", year=2025)
        data = result.to_dict()
        assert data["success"] is True
        assert data["semester"] == "Fall"
        assert data["assignments"] == []
        assert data["saved"] is False
        assert "generation_date" in data
        assert result.total_assigned == 0
        assert result.total_unassigned == 0
