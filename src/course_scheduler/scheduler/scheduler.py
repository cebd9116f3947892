"""Run orchestration: load a snapshot, search once, package and commit."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from ..exceptions import InvalidSemesterError, InvalidYearError, NoClassroomsError, NoSectionsError
from .constants import (
    DAYS,
    DEFAULT_NODE_LIMIT,
    DEFAULT_TIME_LIMIT,
    MAX_YEAR,
    MIN_YEAR,
    TIME_SLOTS,
    VALID_SEMESTERS,
)
from .models import (
    Classroom,
    Day,
    LCVMode,
    ScheduleResult,
    ScheduleStatistics,
    Section,
    StudentLoad,
    TimeSlot,
)
from .persistence import ScheduleRepository
from .search import BacktrackingSearch
from .state import SchedulingState
from .utils import (
    count_by_classroom,
    count_by_day,
    restrict_student_load,
    sort_classrooms_by_capacity,
    sort_sections_by_capacity,
)

logger = logging.getLogger(__name__)

_DAY_ORDER = {day.value: index for index, day in enumerate(Day)}


def validate_term(semester: str, year: int) -> None:
    """Check that a (semester, year) selector is supported.

    Raises:
        InvalidSemesterError: Semester is not one of VALID_SEMESTERS
        InvalidYearError: Year is outside MIN_YEAR..MAX_YEAR
    """
    if semester not in VALID_SEMESTERS:
        raise InvalidSemesterError(semester, VALID_SEMESTERS)
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidYearError(year, MIN_YEAR, MAX_YEAR)


def run_schedule(
    sections: Sequence[Section],
    classrooms: Sequence[Classroom],
    student_load: StudentLoad | None = None,
    *,
    semester: str = "",
    year: int = 0,
    lcv_mode: LCVMode = LCVMode.FULL,
    max_nodes: int | None = DEFAULT_NODE_LIMIT,
    time_limit: float | None = DEFAULT_TIME_LIMIT,
    should_cancel: Callable[[], bool] | None = None,
    days: Sequence[Day] = DAYS,
    time_slots: Sequence[TimeSlot] = TIME_SLOTS,
) -> ScheduleResult:
    """Schedule sections into classrooms with a single search run.

    The given order of sections and classrooms is the seed order of the
    search; identical inputs always give identical results unless a time
    limit is set.

    Args:
        sections: Sections to schedule, in seed order
        classrooms: Available classrooms, in seed order
        student_load: Student id -> enrolled section ids
        semester: Term label copied into the result
        year: Term year copied into the result
        lcv_mode: Conflict channels counted by the LCV heuristic
        max_nodes: Search node budget, None for unlimited
        time_limit: Wall-clock limit in seconds, None for unlimited
        should_cancel: Callback polled at every node to stop the search
        days: Day catalog for this run
        time_slots: Time slot catalog for this run

    Returns:
        ScheduleResult with assignments, unassigned sections and statistics

    Raises:
        NoSectionsError: No sections were given
        NoClassroomsError: No classrooms were given
    """
    started = time.perf_counter()

    if not sections:
        raise NoSectionsError(semester or None, year or None)
    if not classrooms:
        raise NoClassroomsError()

    section_ids = [s.id for s in sections]
    load = restrict_student_load(student_load or {}, section_ids)

    logger.info(
        f"Scheduling {len(sections)} sections into {len(classrooms)} classrooms "
        f"({len(load)} students with enrollments)"
    )

    state = SchedulingState(sections, classrooms, load, days=days, time_slots=time_slots)
    search = BacktrackingSearch(
        state,
        lcv_mode=lcv_mode,
        max_nodes=max_nodes,
        time_limit=time_limit,
        should_cancel=should_cancel,
    )
    outcome = search.solve()

    duration_ms = int((time.perf_counter() - started) * 1000)
    statistics = ScheduleStatistics(
        total_sections=len(sections),
        scheduled=len(outcome.assignments),
        unscheduled=len(outcome.unassigned),
        backtrack_count=outcome.backtrack_count,
        node_count=outcome.node_count,
        duration_ms=duration_ms,
        aborted=outcome.aborted,
        by_day=count_by_day(outcome.assignments),
        by_classroom=count_by_classroom(outcome.assignments),
    )

    logger.info(
        f"Completed in {duration_ms}ms. Success: {outcome.success} "
        f"({statistics.scheduled}/{statistics.total_sections} scheduled, "
        f"{outcome.backtrack_count} backtracks)"
    )
    if not outcome.success:
        logger.warning(f"Partial schedule: {statistics.unscheduled} sections unscheduled")

    return ScheduleResult(
        success=outcome.success,
        semester=semester,
        year=year,
        assignments=outcome.assignments,
        unassigned=outcome.unassigned,
        conflicts=outcome.conflicts,
        statistics=statistics,
    )


class CourseScheduler:
    """Drives scheduling runs against a repository.

    Each run loads a fresh snapshot, builds a fresh SchedulingState, invokes
    the search once and optionally commits the assignments through the
    repository. Runs for different terms share no mutable data.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        lcv_mode: LCVMode = LCVMode.FULL,
        max_nodes: int | None = DEFAULT_NODE_LIMIT,
        time_limit: float | None = DEFAULT_TIME_LIMIT,
        commit_partial: bool = False,
        days: Sequence[Day] = DAYS,
        time_slots: Sequence[TimeSlot] = TIME_SLOTS,
    ):
        """
        Initialize the scheduler.

        Args:
            repository: Source of sections, classrooms and enrollments, and
                        sink for committed schedules
            lcv_mode: Conflict channels counted by the LCV heuristic
            max_nodes: Search node budget per run
            time_limit: Wall-clock limit per run in seconds
            commit_partial: Also save schedules where some sections failed
            days: Day catalog
            time_slots: Time slot catalog
        """
        self.repository = repository
        self.lcv_mode = lcv_mode
        self.max_nodes = max_nodes
        self.time_limit = time_limit
        self.commit_partial = commit_partial
        self.days = tuple(days)
        self.time_slots = tuple(time_slots)

    def load_snapshot(
        self, semester: str, year: int
    ) -> tuple[list[Section], list[Classroom], StudentLoad]:
        """Fetch the read-only input of a run, in seed order.

        Sections are ordered by descending capacity so large sections are
        attempted first; classrooms by descending capacity.
        """
        sections = sort_sections_by_capacity(self.repository.fetch_sections(semester, year))
        classrooms = sort_classrooms_by_capacity(self.repository.fetch_classrooms())
        student_load = self.repository.fetch_student_load([s.id for s in sections])
        return sections, classrooms, student_load

    def generate(self, semester: str, year: int, save: bool = True) -> ScheduleResult:
        """Generate a schedule for a term.

        Args:
            semester: Fall, Spring or Summer
            year: Academic year
            save: Commit the assignments through the repository

        Returns:
            ScheduleResult of the run; ``saved`` tells whether it was committed
        """
        validate_term(semester, year)
        logger.info(f"Starting schedule generation for {semester} {year}")

        sections, classrooms, student_load = self.load_snapshot(semester, year)
        result = run_schedule(
            sections,
            classrooms,
            student_load,
            semester=semester,
            year=year,
            lcv_mode=self.lcv_mode,
            max_nodes=self.max_nodes,
            time_limit=self.time_limit,
            days=self.days,
            time_slots=self.time_slots,
        )

        if save and result.assignments and (result.success or self.commit_partial):
            self.repository.save_schedule(result.assignments)
            result.saved = True
        elif save and not result.success:
            logger.warning("Schedule not saved: partial results are not committed")

        return result

    def preview(self, semester: str, year: int) -> ScheduleResult:
        """Generate a schedule without saving it."""
        return self.generate(semester, year, save=False)

    def get_schedule(
        self,
        semester: str,
        year: int,
        section_id: str | None = None,
        classroom_id: str | None = None,
        instructor_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Get stored schedule entries of a term, ordered by day and start time.

        Args:
            semester: Term semester
            year: Term year
            section_id: Only entries of this section
            classroom_id: Only entries in this classroom
            instructor_id: Only entries of sections taught by this instructor

        Returns:
            List of entry dictionaries with nested section and classroom info
        """
        sections = {s.id: s for s in self.repository.fetch_sections(semester, year)}

        rows = []
        for entry in self.repository.load_entries():
            section = sections.get(entry.section_id)
            if section is None:
                continue
            if section_id is not None and entry.section_id != section_id:
                continue
            if classroom_id is not None and entry.classroom_id != classroom_id:
                continue
            if instructor_id is not None and section.instructor_id != instructor_id:
                continue

            classroom = self.repository.get_classroom(entry.classroom_id)
            rows.append(
                {
                    "day": entry.day,
                    "start_time": entry.start_time,
                    "end_time": entry.end_time,
                    "section": {
                        "id": section.id,
                        "course_code": section.course_code,
                        "course_name": section.course_name,
                        "section_number": section.section_number,
                        "instructor": section.instructor_display,
                    },
                    "classroom": {
                        "id": entry.classroom_id,
                        "building": classroom.building if classroom else "",
                        "room_number": classroom.room_number if classroom else "",
                        "capacity": classroom.capacity if classroom else None,
                    },
                }
            )

        rows.sort(key=lambda r: (_DAY_ORDER.get(r["day"], len(_DAY_ORDER)), r["start_time"]))
        return rows

    def clear_schedule(self, semester: str, year: int) -> int:
        """Delete stored entries of every section in a term.

        Returns:
            Number of deleted entries
        """
        section_ids = [s.id for s in self.repository.fetch_sections(semester, year)]
        deleted = self.repository.delete_entries(section_ids)
        logger.info(f"Cleared {deleted} schedule entries for {semester} {year}")
        return deleted

    def info(self) -> dict[str, Any]:
        """Describe the scheduling grid and the available data."""
        classroom_count = len(self.repository.fetch_classrooms())
        terms = sorted(
            self.repository.list_terms().items(),
            key=lambda item: (-item[0][1], item[0][0]),
        )
        return {
            "sections_by_semester": [
                {"semester": semester, "year": year, "count": count}
                for (semester, year), count in terms
            ],
            "available_classrooms": classroom_count,
            "enrolled_students": self.repository.count_students(),
            "time_slots": [
                {"id": slot.id, "start": slot.start, "end": slot.end}
                for slot in self.time_slots
            ],
            "days_of_week": [day.value for day in self.days],
            "total_slots_per_week": len(self.time_slots) * len(self.days) * classroom_count,
        }
