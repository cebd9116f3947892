"""Utility functions for preparing scheduling input and summarising output."""

from collections import defaultdict
from collections.abc import Iterable

from .models import Assignment, Classroom, Section, StudentLoad


def sort_sections_by_capacity(sections: Iterable[Section]) -> list[Section]:
    """Sort sections so that the largest ones are attempted first.

    The sort is stable: sections with equal capacity keep their input order,
    which is what the MRV tie-break relies on.

    Args:
        sections: Sections to schedule

    Returns:
        New list ordered by required capacity (descending)
    """
    return sorted(sections, key=lambda s: -s.required_capacity)


def sort_classrooms_by_capacity(classrooms: Iterable[Classroom]) -> list[Classroom]:
    """Sort classrooms by capacity (descending), keeping input order on ties."""
    return sorted(classrooms, key=lambda c: -c.capacity)


def build_student_load(
    enrollments: Iterable[tuple[str, str]],
    section_ids: Iterable[str] | None = None,
) -> StudentLoad:
    """Group (student_id, section_id) pairs into a per-student section index.

    Args:
        enrollments: Pairs of (student_id, section_id)
        section_ids: If given, sections outside this set are dropped and
                     students left without sections are omitted

    Returns:
        Mapping of student id to the frozenset of their section ids
    """
    allowed = set(section_ids) if section_ids is not None else None
    grouped: dict[str, set[str]] = defaultdict(set)
    for student_id, section_id in enrollments:
        if allowed is not None and section_id not in allowed:
            continue
        grouped[str(student_id)].add(str(section_id))
    return {student: frozenset(sections) for student, sections in grouped.items()}


def restrict_student_load(student_load: StudentLoad, section_ids: Iterable[str]) -> StudentLoad:
    """Drop sections that are not part of the current run."""
    allowed = set(section_ids)
    restricted = {}
    for student, sections in student_load.items():
        kept = frozenset(s for s in sections if s in allowed)
        if kept:
            restricted[student] = kept
    return restricted


def count_by_day(assignments: Iterable[Assignment]) -> dict[str, int]:
    """Count scheduled sections per day."""
    counts: dict[str, int] = defaultdict(int)
    for assignment in assignments:
        counts[assignment.day.value] += 1
    return dict(counts)


def count_by_classroom(assignments: Iterable[Assignment]) -> dict[str, int]:
    """Count scheduled sections per classroom label."""
    counts: dict[str, int] = defaultdict(int)
    for assignment in assignments:
        counts[assignment.classroom.label] += 1
    return dict(counts)
