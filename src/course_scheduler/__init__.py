"""Course Scheduler - classroom and time slot assignment for course sections.

This module places course sections into classrooms and weekly time slots so
that no classroom, instructor or student is double-booked and every section
gets a room with enough seats.

Example usage:
    from course_scheduler import CourseScheduler, DirectoryRepository

    scheduler = CourseScheduler(DirectoryRepository(Path("data")))
    result = scheduler.preview("Fall", 2025)

    print(f"Scheduled: {result.total_assigned}")
    for item in result.unassigned:
        print(f"{item.section.id}: {item.details}")

    # Export to JSON
    from course_scheduler.scheduler import export_schedule_json
    export_schedule_json(result, "output/schedule.json")
"""

from .exceptions import (
    InvalidDataError,
    InvalidSemesterError,
    InvalidYearError,
    NoClassroomsError,
    NoSectionsError,
    PersistenceError,
    SchedulingError,
    SchedulingStateError,
)
from .scheduler import (
    Assignment,
    Classroom,
    CourseScheduler,
    DirectoryRepository,
    InMemoryRepository,
    LCVMode,
    ScheduleResult,
    Section,
    run_schedule,
)

__version__ = "0.1.0"

__all__ = [
    # Main scheduler
    "CourseScheduler",
    "run_schedule",
    "DirectoryRepository",
    "InMemoryRepository",
    # Models
    "Assignment",
    "Classroom",
    "LCVMode",
    "ScheduleResult",
    "Section",
    # Exceptions
    "SchedulingError",
    "NoSectionsError",
    "NoClassroomsError",
    "InvalidSemesterError",
    "InvalidYearError",
    "InvalidDataError",
    "SchedulingStateError",
    "PersistenceError",
]
