"""Mutable working state of one scheduling run."""

import copy
from collections import defaultdict
from collections.abc import Sequence

from ..exceptions import SchedulingStateError
from .constants import DAYS, TIME_SLOTS
from .models import (
    Assignment,
    Cell,
    Classroom,
    Conflict,
    ConflictType,
    Day,
    Section,
    StudentLoad,
    TimeSlot,
)


class SchedulingState:
    """Committed assignments plus the lookup grids used for consistency checks.

    Three grids map a Cell ``(resource_id, day, time_slot_id)`` to the id of
    the section occupying it:
    - classroom_grid: keyed by classroom id
    - instructor_grid: keyed by instructor id
    - student_grid: keyed by student id

    Every check is a direct dictionary lookup. ``assign`` and ``unassign`` are
    exact inverses, so a depth-first search can commit and retract values
    without leaking entries into the grids.

    The problem description (sections, classrooms, student load, catalogs) is
    held read-only; a state instance belongs to exactly one run.
    """

    def __init__(
        self,
        sections: Sequence[Section],
        classrooms: Sequence[Classroom],
        student_load: StudentLoad | None = None,
        days: Sequence[Day] = DAYS,
        time_slots: Sequence[TimeSlot] = TIME_SLOTS,
    ) -> None:
        self.sections: tuple[Section, ...] = tuple(sections)
        self.classrooms: tuple[Classroom, ...] = tuple(classrooms)
        self.days: tuple[Day, ...] = tuple(days)
        self.time_slots: tuple[TimeSlot, ...] = tuple(time_slots)
        self.student_load: StudentLoad = dict(student_load or {})

        self.sections_by_id: dict[str, Section] = {s.id: s for s in self.sections}
        if len(self.sections_by_id) != len(self.sections):
            raise SchedulingStateError("Duplicate section ids in scheduling input")
        # Seeded input order, used for deterministic tie-breaks
        self.section_order: dict[str, int] = {
            s.id: index for index, s in enumerate(self.sections)
        }

        # section_id -> students enrolled in it (only sections in this run)
        students: dict[str, list[str]] = defaultdict(list)
        for student_id in sorted(self.student_load):
            for section_id in self.student_load[student_id]:
                if section_id in self.sections_by_id:
                    students[section_id].append(student_id)
        self._section_students: dict[str, tuple[str, ...]] = {
            section_id: tuple(ids) for section_id, ids in students.items()
        }

        self.classroom_grid: dict[Cell, str] = {}
        self.instructor_grid: dict[Cell, str] = {}
        self.student_grid: dict[Cell, str] = {}
        # section_id -> Assignment, in the order the values were committed
        self.assignments: dict[str, Assignment] = {}
        self.unassigned: set[str] = set(self.sections_by_id)

    def students_of(self, section_id: str) -> tuple[str, ...]:
        """Get the students enrolled in a section."""
        return self._section_students.get(section_id, ())

    def is_assigned(self, section_id: str) -> bool:
        """Check whether a section currently holds an assignment."""
        return section_id in self.assignments

    @property
    def assigned_count(self) -> int:
        """Number of committed assignments."""
        return len(self.assignments)

    def get_assignments(self) -> list[Assignment]:
        """Get committed assignments in trail order."""
        return list(self.assignments.values())

    def get_unassigned_sections(self) -> list[Section]:
        """Get unassigned sections in seeded input order."""
        return [s for s in self.sections if s.id in self.unassigned]

    def is_classroom_available(self, classroom_id: str, day: Day, slot_id: int) -> bool:
        """Check if a classroom is free at the given cell."""
        return (classroom_id, day, slot_id) not in self.classroom_grid

    def is_instructor_available(
        self, instructor_id: str | None, day: Day, slot_id: int
    ) -> bool:
        """Check if an instructor is free. Sections without one never clash."""
        if not instructor_id:
            return True
        return (instructor_id, day, slot_id) not in self.instructor_grid

    def are_students_available(self, section_id: str, day: Day, slot_id: int) -> bool:
        """Check that no student of the section already has a class at this time."""
        for student_id in self.students_of(section_id):
            if (student_id, day, slot_id) in self.student_grid:
                return False
        return True

    def is_consistent(
        self,
        section: Section,
        classroom: Classroom,
        day: Day,
        time_slot: TimeSlot,
    ) -> bool:
        """Check whether placing a section at a value keeps every hard constraint.

        Args:
            section: Section to place
            classroom: Candidate classroom
            day: Candidate day
            time_slot: Candidate time slot

        Returns:
            True if the classroom and instructor are free, the room is large
            enough and none of the section's students is busy at that time
        """
        if classroom.capacity < section.required_capacity:
            return False
        if not self.is_classroom_available(classroom.id, day, time_slot.id):
            return False
        if not self.is_instructor_available(section.instructor_id, day, time_slot.id):
            return False
        return self.are_students_available(section.id, day, time_slot.id)

    def assign(
        self,
        section: Section,
        classroom: Classroom,
        day: Day,
        time_slot: TimeSlot,
    ) -> Assignment:
        """Commit a section to a (classroom, day, time slot) value.

        Raises:
            SchedulingStateError: If the section is already assigned or the
                value would violate a hard constraint
        """
        if section.id not in self.unassigned:
            raise SchedulingStateError(f"Section '{section.id}' is already assigned")
        if not self.is_consistent(section, classroom, day, time_slot):
            raise SchedulingStateError(
                f"Section '{section.id}' cannot be placed in classroom "
                f"'{classroom.id}' on {day.value} slot {time_slot.id}"
            )

        assignment = Assignment(section, classroom, day, time_slot)
        self.assignments[section.id] = assignment
        self.unassigned.discard(section.id)

        self.classroom_grid[(classroom.id, day, time_slot.id)] = section.id
        if section.instructor_id:
            self.instructor_grid[(section.instructor_id, day, time_slot.id)] = section.id
        for student_id in self.students_of(section.id):
            self.student_grid[(student_id, day, time_slot.id)] = section.id

        return assignment

    def unassign(
        self,
        section: Section,
        classroom: Classroom,
        day: Day,
        time_slot: TimeSlot,
    ) -> None:
        """Retract a value committed by assign() (exact inverse).

        Raises:
            SchedulingStateError: If the value is not the section's current
                assignment
        """
        current = self.assignments.get(section.id)
        if current is None or current.key != (section.id, classroom.id, day, time_slot.id):
            raise SchedulingStateError(
                f"Section '{section.id}' is not assigned to classroom "
                f"'{classroom.id}' on {day.value} slot {time_slot.id}"
            )

        del self.assignments[section.id]
        self.unassigned.add(section.id)

        del self.classroom_grid[(classroom.id, day, time_slot.id)]
        if section.instructor_id:
            del self.instructor_grid[(section.instructor_id, day, time_slot.id)]
        for student_id in self.students_of(section.id):
            del self.student_grid[(student_id, day, time_slot.id)]

    def detect_conflicts(self) -> list[Conflict]:
        """Re-scan committed assignments for residual double bookings.

        This is a post-run sanity report. With a correct assign/unassign pair
        it is always empty.

        Returns:
            One Conflict per over-booked classroom, instructor or student cell
        """
        buckets: dict[tuple[ConflictType, str, Day, int], list[str]] = defaultdict(list)
        for assignment in self.assignments.values():
            day, slot_id = assignment.day, assignment.time_slot.id
            section_id = assignment.section.id
            buckets[(ConflictType.CLASSROOM, assignment.classroom.id, day, slot_id)].append(
                section_id
            )
            if assignment.section.instructor_id:
                buckets[
                    (ConflictType.INSTRUCTOR, assignment.section.instructor_id, day, slot_id)
                ].append(section_id)
            for student_id in self.students_of(section_id):
                buckets[(ConflictType.STUDENT, student_id, day, slot_id)].append(section_id)

        return [
            Conflict(
                type=conflict_type,
                resource_id=resource_id,
                day=day,
                time_slot_id=slot_id,
                section_ids=section_ids,
            )
            for (conflict_type, resource_id, day, slot_id), section_ids in buckets.items()
            if len(section_ids) > 1
        ]

    def snapshot(self) -> dict:
        """Deep copy of the mutable parts of the state."""
        return copy.deepcopy(
            {
                "classroom_grid": self.classroom_grid,
                "instructor_grid": self.instructor_grid,
                "student_grid": self.student_grid,
                "assignments": {k: a.key for k, a in self.assignments.items()},
                "unassigned": self.unassigned,
            }
        )
