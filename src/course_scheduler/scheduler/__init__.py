"""University course scheduling using a backtracking CSP search.

This package assigns course sections to classrooms and weekly time slots.
Hard constraints are classroom, instructor and student double booking plus
classroom capacity. The search uses MRV variable selection and LCV value
ordering; sections that cannot be placed are reported with reasons.

Main classes:
- CourseScheduler: Runs scheduling against a ScheduleRepository
- BacktrackingSearch: The search engine over a SchedulingState
- SchedulingState: Assignments plus classroom/instructor/student grids

Usage:
    from course_scheduler.scheduler import CourseScheduler, DirectoryRepository

    scheduler = CourseScheduler(DirectoryRepository(Path("data")))
    result = scheduler.generate("Fall", 2025)
"""

from .config import ConfigLoader
from .constants import (
    DAYS,
    DEFAULT_NODE_LIMIT,
    DEFAULT_TIME_LIMIT,
    NO_VALID_ASSIGNMENT_REASON,
    TIME_SLOTS,
    VALID_SEMESTERS,
)
from .exporter import export_schedule_json, load_schedule_json
from .models import (
    Assignment,
    Classroom,
    Conflict,
    ConflictType,
    Day,
    LCVMode,
    ScheduleResult,
    ScheduleStatistics,
    Section,
    StudentLoad,
    TimeSlot,
    UnassignedSection,
    UnscheduledReason,
)
from .persistence import (
    DirectoryRepository,
    InMemoryRepository,
    ScheduleEntry,
    ScheduleRepository,
)
from .scheduler import CourseScheduler, run_schedule, validate_term
from .search import BacktrackingSearch, SearchOutcome
from .state import SchedulingState

__all__ = [
    # Orchestration
    "CourseScheduler",
    "run_schedule",
    "validate_term",
    # Engine
    "BacktrackingSearch",
    "SearchOutcome",
    "SchedulingState",
    # Storage
    "ScheduleRepository",
    "InMemoryRepository",
    "DirectoryRepository",
    "ScheduleEntry",
    "ConfigLoader",
    # Models
    "Assignment",
    "Classroom",
    "Conflict",
    "ConflictType",
    "Day",
    "LCVMode",
    "ScheduleResult",
    "ScheduleStatistics",
    "Section",
    "StudentLoad",
    "TimeSlot",
    "UnassignedSection",
    "UnscheduledReason",
    # Constants
    "DAYS",
    "TIME_SLOTS",
    "DEFAULT_NODE_LIMIT",
    "DEFAULT_TIME_LIMIT",
    "NO_VALID_ASSIGNMENT_REASON",
    "VALID_SEMESTERS",
    # Export
    "export_schedule_json",
    "load_schedule_json",
]
