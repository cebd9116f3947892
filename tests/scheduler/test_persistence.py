"""Tests for schedule repositories."""

import json

import pytest

from course_scheduler.exceptions import PersistenceError
from course_scheduler.scheduler.constants import TIME_SLOTS
from course_scheduler.scheduler.models import Assignment, Classroom, Day, Section
from course_scheduler.scheduler.persistence import (
    DirectoryRepository,
    InMemoryRepository,
    ScheduleEntry,
    merge_schedule,
)


def make_assignment(section_id, classroom_id="R1", day=Day.MONDAY, slot=0):
    return Assignment(
        Section(section_id, 10),
        Classroom(classroom_id, 30, "Main"),
        day,
        TIME_SLOTS[slot],
    )


class TestScheduleEntry:
    """Tests for ScheduleEntry."""

    def test_from_assignment_uses_clock_times(self):
        entry = ScheduleEntry.from_assignment(make_assignment("S1", day=Day.FRIDAY, slot=2))
        assert entry == ScheduleEntry("S1", "R1", "Friday", "10:00:00", "10:50:00")

    def test_dict_round_trip(self):
        entry = ScheduleEntry("S1", "R1", "Monday", "08:00:00", "08:50:00")
        assert ScheduleEntry.from_dict(entry.to_dict()) == entry


class TestMergeSchedule:
    """Tests for replacing stored entries."""

    def test_replaces_only_affected_sections(self):
        entries = [
            ScheduleEntry("S1", "R1", "Monday", "08:00:00", "08:50:00"),
            ScheduleEntry("S2", "R1", "Monday", "09:00:00", "09:50:00"),
        ]
        merged, references = merge_schedule(
            entries, {"S1": "R1", "S2": "R1"}, [make_assignment("S1", "R2", Day.TUESDAY)]
        )

        assert [(e.section_id, e.classroom_id, e.day) for e in merged] == [
            ("S2", "R1", "Monday"),
            ("S1", "R2", "Tuesday"),
        ]
        assert references == {"S1": "R2", "S2": "R1"}

    def test_inputs_untouched(self):
        entries = [ScheduleEntry("S1", "R1", "Monday", "08:00:00", "08:50:00")]
        references = {"S1": "R1"}
        merge_schedule(entries, references, [make_assignment("S1", "R2")])
        assert len(entries) == 1
        assert references == {"S1": "R1"}


class TestInMemoryRepository:
    """Tests for InMemoryRepository."""

    def test_fetch_filters(self, sample_sections, sample_classrooms, sample_enrollments):
        repo = InMemoryRepository(sample_sections, sample_classrooms, sample_enrollments)

        assert len(repo.fetch_sections("Fall", 2025)) == 4
        assert [c.id for c in repo.fetch_classrooms()] == ["R1", "R2"]
        assert repo.fetch_student_load(["PH101-1"]) == {"ST3": frozenset({"PH101-1"})}
        assert repo.list_terms() == {("Fall", 2025): 4, ("Spring", 2026): 1}
        assert repo.get_classroom("R3").is_active is False
        assert repo.get_section("missing") is None
        assert repo.count_students() == 3

    def test_save_and_delete(self):
        repo = InMemoryRepository()
        assert repo.save_schedule([make_assignment("S1"), make_assignment("S2", slot=1)]) == 2
        assert repo.get_section_classrooms() == {"S1": "R1", "S2": "R1"}

        assert repo.delete_entries(["S1", "S9"]) == 1
        assert [e.section_id for e in repo.load_entries()] == ["S2"]


class TestDirectoryRepository:
    """Tests for DirectoryRepository."""

    def test_reads_reference_data(self, data_dir):
        repo = DirectoryRepository(data_dir)

        assert [s.id for s in repo.fetch_sections("Spring", 2026)] == ["CS201-1"]
        assert [c.id for c in repo.fetch_classrooms()] == ["R1", "R2"]
        load = repo.fetch_student_load(["CS101-1", "MA101-1", "PH101-1"])
        assert load["ST1"] == frozenset({"CS101-1", "MA101-1"})
        # Dropped enrollments are ignored
        assert "ST4" not in load
        assert repo.count_students() == 3

    def test_empty_without_schedule_file(self, data_dir):
        repo = DirectoryRepository(data_dir)
        assert repo.load_entries() == []
        assert repo.get_section_classrooms() == {}
        assert repo.delete_entries(["CS101-1"]) == 0
        assert not repo.schedule_path.exists()

    def test_save_writes_single_document(self, data_dir):
        repo = DirectoryRepository(data_dir)
        repo.save_schedule([make_assignment("CS101-1"), make_assignment("MA101-1", "R2")])

        assert repo.schedule_path == data_dir / "schedule.json"
        document = json.loads(repo.schedule_path.read_text(encoding="utf-8"))
        assert [e["section_id"] for e in document["entries"]] == ["CS101-1", "MA101-1"]
        assert document["section_classrooms"] == {"CS101-1": "R1", "MA101-1": "R2"}

        # No temporary files left behind
        leftovers = [p for p in data_dir.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_save_replaces_prior_entries(self, data_dir):
        repo = DirectoryRepository(data_dir)
        repo.save_schedule([make_assignment("CS101-1"), make_assignment("MA101-1", "R2")])
        repo.save_schedule([make_assignment("CS101-1", "R2", Day.FRIDAY)])

        entries = {e.section_id: e for e in repo.load_entries()}
        assert len(entries) == 2
        assert entries["CS101-1"].day == "Friday"
        assert repo.get_section_classrooms()["CS101-1"] == "R2"

    def test_delete_entries(self, data_dir):
        repo = DirectoryRepository(data_dir)
        repo.save_schedule([make_assignment("CS101-1"), make_assignment("MA101-1", "R2")])

        assert repo.delete_entries(["CS101-1"]) == 1
        assert [e.section_id for e in DirectoryRepository(data_dir).load_entries()] == [
            "MA101-1"
        ]

    def test_custom_schedule_path(self, data_dir, tmp_path):
        target = tmp_path / "out" / "committed.json"
        repo = DirectoryRepository(data_dir, schedule_path=target)
        repo.save_schedule([make_assignment("CS101-1")])
        assert target.exists()

    def test_corrupt_document_raises(self, data_dir):
        (data_dir / "schedule.json").write_text("{not json", encoding="utf-8")
        repo = DirectoryRepository(data_dir)
        with pytest.raises(PersistenceError) as exc_info:
            repo.load_entries()
        assert exc_info.value.code == "PERSISTENCE_ERROR"

    def test_failed_save_keeps_previous_document(self, data_dir):
        repo = DirectoryRepository(data_dir)
        repo.save_schedule([make_assignment("CS101-1")])
        before = repo.schedule_path.read_text(encoding="utf-8")

        # A directory in the way of the target makes os.replace fail
        blocked = DirectoryRepository(data_dir, schedule_path=data_dir / "blocked.json")
        (data_dir / "blocked.json").mkdir()
        with pytest.raises(PersistenceError):
            blocked._write_document([], {})

        assert repo.schedule_path.read_text(encoding="utf-8") == before
        assert [p for p in data_dir.iterdir() if p.suffix == ".tmp"] == []
