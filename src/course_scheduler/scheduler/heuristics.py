"""Domain computation and search-ordering heuristics.

All functions here are pure with respect to the SchedulingState: they read
the grids but never modify them, so each can be tested on a hand-built state
without running a search.

- MRV (minimum remaining values) picks the unassigned section with the
  fewest consistent values left.
- LCV (least constraining value) orders a section's values so that the ones
  removing the fewest options from other sections are tried first.
"""

from collections.abc import Iterable

from .models import Classroom, Day, LCVMode, Section, TimeSlot
from .state import SchedulingState

# A candidate value for a section
Value = tuple[Classroom, Day, TimeSlot]


def candidate_values(state: SchedulingState, section: Section) -> list[Value]:
    """Get every capacity-feasible value for a section, in catalog order.

    Order is classroom (as seeded), then day, then time slot.
    """
    return [
        (classroom, day, time_slot)
        for classroom in state.classrooms
        if classroom.capacity >= section.required_capacity
        for day in state.days
        for time_slot in state.time_slots
    ]


def consistent_domain(state: SchedulingState, section: Section) -> list[Value]:
    """Get the values a section can take in the current state."""
    return [
        value
        for value in candidate_values(state, section)
        if state.is_consistent(section, *value)
    ]


def domain_size(state: SchedulingState, section: Section) -> int:
    """Count the values a section can take in the current state."""
    count = 0
    for classroom in state.classrooms:
        if classroom.capacity < section.required_capacity:
            continue
        for day in state.days:
            for time_slot in state.time_slots:
                if state.is_consistent(section, classroom, day, time_slot):
                    count += 1
    return count


def has_capacity(state: SchedulingState, section: Section) -> bool:
    """Check if at least one classroom is large enough for the section."""
    return any(c.capacity >= section.required_capacity for c in state.classrooms)


def select_unassigned_section(state: SchedulingState) -> Section | None:
    """MRV: pick the unassigned section with the smallest positive domain.

    Sections with an empty domain are skipped. Ties go to the section that
    comes first in the seeded input order.

    Returns:
        The selected section, or None if no unassigned section has any
        consistent value left
    """
    selected: Section | None = None
    best_size = 0
    for section in state.get_unassigned_sections():
        size = domain_size(state, section)
        if size == 0:
            continue
        if selected is None or size < best_size:
            selected = section
            best_size = size
    return selected


def has_option_at(state: SchedulingState, section: Section, day: Day, time_slot: TimeSlot) -> bool:
    """Check if a section has any consistent classroom at (day, time slot)."""
    return any(
        state.is_consistent(section, classroom, day, time_slot)
        for classroom in state.classrooms
        if classroom.capacity >= section.required_capacity
    )


def constraint_score(
    state: SchedulingState,
    section: Section,
    value: Value,
    mode: LCVMode = LCVMode.FULL,
) -> int:
    """Count the other unassigned sections that would lose an option to value.

    A section is counted at most once, however many of its options the value
    removes.

    Args:
        state: Current scheduling state
        section: Section being placed
        value: Candidate (classroom, day, time slot)
        mode: INSTRUCTOR counts only sections sharing the instructor;
              FULL also counts sections that could use the same classroom
              cell and sections sharing a student

    Returns:
        Number of constrained sections (lower is less constraining)
    """
    classroom, day, time_slot = value
    students = set(state.students_of(section.id)) if mode == LCVMode.FULL else set()

    score = 0
    for other in state.get_unassigned_sections():
        if other.id == section.id:
            continue

        shares_instructor = bool(section.instructor_id) and (
            other.instructor_id == section.instructor_id
        )
        if shares_instructor and has_option_at(state, other, day, time_slot):
            score += 1
            continue

        if mode == LCVMode.INSTRUCTOR:
            continue

        if state.is_consistent(other, classroom, day, time_slot):
            score += 1
            continue

        if students and not students.isdisjoint(state.students_of(other.id)):
            if has_option_at(state, other, day, time_slot):
                score += 1

    return score


def order_domain_values(
    state: SchedulingState,
    section: Section,
    values: Iterable[Value],
    mode: LCVMode = LCVMode.FULL,
) -> list[Value]:
    """LCV: sort values by constraint score, least constraining first.

    The sort is stable, so equally scored values keep catalog order.
    """
    scored = [(constraint_score(state, section, value, mode), value) for value in values]
    scored.sort(key=lambda item: item[0])
    return [value for _, value in scored]
