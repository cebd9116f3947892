"""Storage boundary for scheduling input and committed schedules."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..exceptions import PersistenceError
from .config import ConfigLoader
from .models import Assignment, Classroom, Section, StudentLoad
from .utils import build_student_load

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleEntry:
    """A stored weekly meeting of a section."""

    section_id: str
    classroom_id: str
    day: str
    start_time: str
    end_time: str
    is_active: bool = True

    @classmethod
    def from_assignment(cls, assignment: Assignment) -> "ScheduleEntry":
        """Create a stored entry from an engine assignment."""
        return cls(
            section_id=assignment.section.id,
            classroom_id=assignment.classroom.id,
            day=assignment.day.value,
            start_time=f"{assignment.time_slot.start}:00",
            end_time=f"{assignment.time_slot.end}:00",
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleEntry":
        """Create an entry from a dictionary."""
        return cls(
            section_id=str(data["section_id"]),
            classroom_id=str(data["classroom_id"]),
            day=data["day"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            is_active=data.get("is_active", True),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to dictionary."""
        return {
            "section_id": self.section_id,
            "classroom_id": self.classroom_id,
            "day": self.day,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_active": self.is_active,
        }


def merge_schedule(
    entries: Iterable[ScheduleEntry],
    section_classrooms: dict[str, str],
    assignments: Sequence[Assignment],
) -> tuple[list[ScheduleEntry], dict[str, str]]:
    """Replace the stored schedule of the assigned sections.

    Prior entries of every affected section are dropped, the new entries are
    appended and each section's classroom reference is updated. Inputs are not
    modified; callers swap the returned values in as one step.

    Returns:
        Tuple of (new entry list, new section -> classroom mapping)
    """
    affected = {a.section.id for a in assignments}
    merged = [e for e in entries if e.section_id not in affected]
    merged.extend(ScheduleEntry.from_assignment(a) for a in assignments)

    references = dict(section_classrooms)
    for assignment in assignments:
        references[assignment.section.id] = assignment.classroom.id
    return merged, references


class ScheduleRepository(ABC):
    """Source of scheduling snapshots and sink for committed schedules."""

    @abstractmethod
    def fetch_sections(self, semester: str, year: int) -> list[Section]:
        """Get the sections offered in a term."""

    @abstractmethod
    def fetch_classrooms(self) -> list[Classroom]:
        """Get the classrooms available for scheduling."""

    @abstractmethod
    def fetch_student_load(self, section_ids: Iterable[str]) -> StudentLoad:
        """Get enrolled students per section, restricted to the given sections."""

    @abstractmethod
    def save_schedule(self, assignments: Sequence[Assignment]) -> int:
        """Atomically replace the stored schedule of the assigned sections.

        Returns:
            Number of entries written
        """

    @abstractmethod
    def load_entries(self) -> list[ScheduleEntry]:
        """Get all stored schedule entries."""

    @abstractmethod
    def get_section_classrooms(self) -> dict[str, str]:
        """Get the classroom reference stored for each scheduled section."""

    @abstractmethod
    def delete_entries(self, section_ids: Iterable[str]) -> int:
        """Delete stored entries of the given sections.

        Returns:
            Number of entries deleted
        """

    @abstractmethod
    def get_section(self, section_id: str) -> Section | None:
        """Get a section by id."""

    @abstractmethod
    def get_classroom(self, classroom_id: str) -> Classroom | None:
        """Get a classroom by id."""

    @abstractmethod
    def list_terms(self) -> dict[tuple[str, int], int]:
        """Count sections per (semester, year)."""

    @abstractmethod
    def count_students(self) -> int:
        """Number of distinct students with at least one enrollment."""


class InMemoryRepository(ScheduleRepository):
    """Repository backed by plain Python collections."""

    def __init__(
        self,
        sections: Iterable[Section] = (),
        classrooms: Iterable[Classroom] = (),
        enrollments: Iterable[tuple[str, str]] = (),
    ) -> None:
        """
        Args:
            sections: All known sections
            classrooms: All known classrooms (inactive ones are filtered out)
            enrollments: Pairs of (student_id, section_id)
        """
        self.sections = list(sections)
        self.classrooms = list(classrooms)
        self.enrollments = list(enrollments)
        self.entries: list[ScheduleEntry] = []
        self.section_classrooms: dict[str, str] = {}

    def fetch_sections(self, semester: str, year: int) -> list[Section]:
        return [s for s in self.sections if s.semester == semester and s.year == year]

    def fetch_classrooms(self) -> list[Classroom]:
        return [c for c in self.classrooms if c.is_active]

    def fetch_student_load(self, section_ids: Iterable[str]) -> StudentLoad:
        return build_student_load(self.enrollments, section_ids)

    def save_schedule(self, assignments: Sequence[Assignment]) -> int:
        entries, references = merge_schedule(
            self.entries, self.section_classrooms, assignments
        )
        self.entries, self.section_classrooms = entries, references
        return len(assignments)

    def load_entries(self) -> list[ScheduleEntry]:
        return list(self.entries)

    def get_section_classrooms(self) -> dict[str, str]:
        return dict(self.section_classrooms)

    def delete_entries(self, section_ids: Iterable[str]) -> int:
        targets = set(section_ids)
        kept = [e for e in self.entries if e.section_id not in targets]
        deleted = len(self.entries) - len(kept)
        self.entries = kept
        return deleted

    def get_section(self, section_id: str) -> Section | None:
        return next((s for s in self.sections if s.id == section_id), None)

    def get_classroom(self, classroom_id: str) -> Classroom | None:
        return next((c for c in self.classrooms if c.id == classroom_id), None)

    def list_terms(self) -> dict[tuple[str, int], int]:
        return dict(Counter((s.semester, s.year) for s in self.sections))

    def count_students(self) -> int:
        return len({str(student) for student, _ in self.enrollments})


class DirectoryRepository(ScheduleRepository):
    """Repository reading reference CSVs from a directory.

    The committed schedule lives in a single JSON document holding both the
    entries and the section classroom references. It is rewritten through a
    temporary file and ``os.replace``, so a reader sees either the old or the
    new document, never a mix.
    """

    SCHEDULE_FILENAME = "schedule.json"

    def __init__(self, config_dir: Path, schedule_path: Path | None = None) -> None:
        self.config = ConfigLoader(config_dir)
        self.schedule_path = (
            Path(schedule_path) if schedule_path else self.config.config_dir / self.SCHEDULE_FILENAME
        )

    def fetch_sections(self, semester: str, year: int) -> list[Section]:
        return self.config.sections.get_sections(semester, year)

    def fetch_classrooms(self) -> list[Classroom]:
        return self.config.classrooms.get_active_classrooms()

    def fetch_student_load(self, section_ids: Iterable[str]) -> StudentLoad:
        return self.config.enrollments.get_student_load(section_ids)

    def save_schedule(self, assignments: Sequence[Assignment]) -> int:
        entries, references = self._read_document()
        entries, references = merge_schedule(entries, references, assignments)
        self._write_document(entries, references)
        logger.info(f"Saved {len(assignments)} schedule entries to {self.schedule_path}")
        return len(assignments)

    def load_entries(self) -> list[ScheduleEntry]:
        entries, _ = self._read_document()
        return entries

    def get_section_classrooms(self) -> dict[str, str]:
        _, references = self._read_document()
        return references

    def delete_entries(self, section_ids: Iterable[str]) -> int:
        targets = set(section_ids)
        entries, references = self._read_document()
        kept = [e for e in entries if e.section_id not in targets]
        deleted = len(entries) - len(kept)
        if deleted:
            self._write_document(kept, references)
        return deleted

    def get_section(self, section_id: str) -> Section | None:
        return self.config.sections.get_section(section_id)

    def get_classroom(self, classroom_id: str) -> Classroom | None:
        return self.config.classrooms.get_classroom(classroom_id)

    def list_terms(self) -> dict[tuple[str, int], int]:
        return self.config.sections.get_terms()

    def count_students(self) -> int:
        return self.config.enrollments.count_students()

    def _read_document(self) -> tuple[list[ScheduleEntry], dict[str, str]]:
        """Read the stored schedule document, empty if it does not exist."""
        if not self.schedule_path.exists():
            return [], {}
        try:
            with open(self.schedule_path, encoding="utf-8") as f:
                data = json.load(f)
            entries = [ScheduleEntry.from_dict(e) for e in data.get("entries", [])]
            references = {str(k): str(v) for k, v in data.get("section_classrooms", {}).items()}
        except (OSError, ValueError, KeyError) as e:
            raise PersistenceError(
                f"Could not read schedule from {self.schedule_path}: {e}"
            ) from e
        return entries, references

    def _write_document(
        self, entries: list[ScheduleEntry], references: dict[str, str]
    ) -> None:
        """Atomically replace the stored schedule document."""
        document = {
            "entries": [e.to_dict() for e in entries],
            "section_classrooms": references,
        }
        directory = self.schedule_path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.schedule_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(document, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.schedule_path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(
                f"Could not write schedule to {self.schedule_path}: {e}"
            ) from e
