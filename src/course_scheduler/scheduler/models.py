"""Data models for the course scheduling system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Day(str, Enum):
    """Days of the teaching week."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"


# (resource_id, day, time_slot_id)
Cell = tuple[str, Day, int]

# student_id -> ids of the sections the student is enrolled in
StudentLoad = dict[str, frozenset[str]]


class UnscheduledReason(str, Enum):
    """Reasons why a section could not be scheduled."""

    NO_CLASSROOM_CAPACITY = "no_classroom_capacity"
    NO_VALID_ASSIGNMENT = "no_valid_assignment"
    SEARCH_ABORTED = "search_aborted"


class ConflictType(str, Enum):
    """Resource channel on which a double booking was found."""

    CLASSROOM = "classroom"
    INSTRUCTOR = "instructor"
    STUDENT = "student"


class LCVMode(str, Enum):
    """Which conflict channels the least-constraining-value score counts.

    INSTRUCTOR only counts sections that share the instructor. FULL also
    counts sections competing for the same classroom cell and sections that
    share a student.
    """

    INSTRUCTOR = "instructor"
    FULL = "full"


@dataclass(frozen=True)
class TimeSlot:
    """An atomic teaching period within a day."""

    id: int
    start: str
    end: str

    @property
    def label(self) -> str:
        """Time range string, e.g. '08:00 - 08:50'."""
        return f"{self.start} - {self.end}"


@dataclass(frozen=True)
class Section:
    """A course section that needs a classroom and a time slot."""

    id: str
    required_capacity: int
    instructor_id: str | None = None
    course_code: str = ""
    course_name: str = ""
    section_number: str = ""
    instructor_name: str = ""
    semester: str = ""
    year: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Section":
        """Create a Section from a dictionary."""
        instructor_id = data.get("instructor_id")
        return cls(
            id=str(data["id"]),
            required_capacity=int(data.get("required_capacity", data.get("capacity", 0))),
            instructor_id=str(instructor_id) if instructor_id not in (None, "") else None,
            course_code=data.get("course_code", ""),
            course_name=data.get("course_name", ""),
            section_number=str(data.get("section_number", "")),
            instructor_name=data.get("instructor_name", ""),
            semester=data.get("semester", ""),
            year=int(data.get("year", 0)),
        )

    @property
    def instructor_display(self) -> str:
        """Instructor name for reports, 'TBA' when nobody is assigned."""
        if self.instructor_name:
            return self.instructor_name
        return self.instructor_id or "TBA"


@dataclass(frozen=True)
class Classroom:
    """A physical classroom."""

    id: str
    capacity: int
    building: str
    room_number: str = ""
    is_active: bool = True

    @property
    def label(self) -> str:
        """Human-readable room name, e.g. 'Engineering 101'."""
        if self.room_number:
            return f"{self.building} {self.room_number}"
        return self.building


@dataclass(frozen=True)
class Assignment:
    """A section placed in a classroom at a (day, time slot)."""

    section: Section
    classroom: Classroom
    day: Day
    time_slot: TimeSlot

    @property
    def section_id(self) -> str:
        return self.section.id

    @property
    def classroom_id(self) -> str:
        return self.classroom.id

    @property
    def time_slot_id(self) -> int:
        return self.time_slot.id

    @property
    def key(self) -> tuple[str, str, Day, int]:
        """Identity of the assignment as (section, classroom, day, slot) ids."""
        return (self.section.id, self.classroom.id, self.day, self.time_slot.id)

    def to_dict(self) -> dict[str, Any]:
        """Convert assignment to dictionary."""
        return {
            "section_id": self.section.id,
            "course_code": self.section.course_code,
            "course_name": self.section.course_name,
            "section_number": self.section.section_number,
            "instructor": self.section.instructor_display,
            "instructor_id": self.section.instructor_id,
            "classroom_id": self.classroom.id,
            "classroom": self.classroom.label,
            "day": self.day.value,
            "time_slot_id": self.time_slot.id,
            "time": self.time_slot.label,
        }


@dataclass
class UnassignedSection:
    """A section that could not be scheduled."""

    section: Section
    reason: UnscheduledReason
    details: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "section_id": self.section.id,
            "course_code": self.section.course_code,
            "course_name": self.section.course_name,
            "reason": self.details,
            "reason_code": self.reason.value,
        }


@dataclass
class Conflict:
    """A residual double booking found by a post-run scan."""

    type: ConflictType
    resource_id: str
    day: Day
    time_slot_id: int
    section_ids: list[str]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": f"{self.type.value}_conflict",
            "resource_id": self.resource_id,
            "day": self.day.value,
            "time_slot": self.time_slot_id,
            "sections": self.section_ids,
        }


@dataclass
class ScheduleStatistics:
    """Statistics about a scheduling run."""

    total_sections: int = 0
    scheduled: int = 0
    unscheduled: int = 0
    backtrack_count: int = 0
    node_count: int = 0
    duration_ms: int = 0
    aborted: bool = False
    by_day: dict[str, int] = field(default_factory=dict)
    by_classroom: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_sections": self.total_sections,
            "scheduled_sections": self.scheduled,
            "unscheduled_sections": self.unscheduled,
            "scheduling_rate": (
                self.scheduled / self.total_sections if self.total_sections > 0 else 0.0
            ),
            "backtrack_count": self.backtrack_count,
            "node_count": self.node_count,
            "duration_ms": self.duration_ms,
            "aborted": self.aborted,
            "by_day": self.by_day,
            "by_classroom": self.by_classroom,
        }


@dataclass
class ScheduleResult:
    """Result of one scheduling run."""

    success: bool = False
    semester: str = ""
    year: int = 0
    assignments: list[Assignment] = field(default_factory=list)
    unassigned: list[UnassignedSection] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    statistics: ScheduleStatistics = field(default_factory=ScheduleStatistics)
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())
    saved: bool = False

    @property
    def total_assigned(self) -> int:
        """Number of scheduled sections."""
        return len(self.assignments)

    @property
    def total_unassigned(self) -> int:
        """Number of sections left unscheduled."""
        return len(self.unassigned)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "semester": self.semester,
            "year": self.year,
            "generation_date": self.generation_date,
            "saved": self.saved,
            "statistics": self.statistics.to_dict(),
            "assignments": [a.to_dict() for a in self.assignments],
            "unassigned": [u.to_dict() for u in self.unassigned],
            "conflicts": [c.to_dict() for c in self.conflicts],
        }
