"""Student enrollment loader."""

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ...exceptions import InvalidDataError
from ..constants import ENROLLED_STATUS
from ..models import StudentLoad

REQUIRED_COLUMNS = ("student_id", "section_id")


class EnrollmentConfig:
    """Loader for enrollments from enrollments.csv.

    Expected columns: student_id, section_id, status (optional). Only rows
    with status 'enrolled' (or no status column) take part in scheduling.
    """

    def __init__(self, enrollments_path: Path | None = None):
        self.enrollments = pd.DataFrame(columns=list(REQUIRED_COLUMNS))

        if enrollments_path and enrollments_path.exists():
            self._load(enrollments_path)

    def _load(self, path: Path) -> None:
        """Load enrollments from CSV file."""
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise InvalidDataError(
                f"missing columns: {', '.join(missing)}", source=path.name
            )

        df["student_id"] = df["student_id"].str.strip()
        df["section_id"] = df["section_id"].str.strip()
        empty = df[(df["student_id"] == "") | (df["section_id"] == "")]
        if not empty.empty:
            # +2: header row and 1-based numbering
            raise InvalidDataError(
                "empty student_id or section_id", source=path.name, row=int(empty.index[0]) + 2
            )

        if "status" in df.columns:
            df = df[df["status"].str.strip().str.lower() == ENROLLED_STATUS]

        self.enrollments = df[list(REQUIRED_COLUMNS)].drop_duplicates().reset_index(drop=True)

    def get_student_load(self, section_ids: Iterable[str]) -> StudentLoad:
        """Group enrollments by student, restricted to the given sections.

        Args:
            section_ids: Sections being scheduled in this run

        Returns:
            Mapping of student id to the frozenset of their section ids
        """
        df = self.enrollments[self.enrollments["section_id"].isin(set(section_ids))]
        return {
            str(student): frozenset(sections)
            for student, sections in df.groupby("student_id")["section_id"]
        }

    def count_students(self) -> int:
        """Number of distinct enrolled students."""
        return int(self.enrollments["student_id"].nunique())
