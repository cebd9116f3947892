"""Course section configuration loader."""

import csv
from collections import Counter
from pathlib import Path

from ...exceptions import InvalidDataError
from ..models import Section


class SectionConfig:
    """Loader for course sections from sections.csv.

    Expected columns: id, course_code, course_name, section_number, capacity,
    instructor_id, instructor_name, semester, year
    """

    def __init__(self, sections_path: Path | None = None):
        self.sections: list[Section] = []
        self._by_id: dict[str, Section] = {}

        if sections_path and sections_path.exists():
            self._load(sections_path)

    def _load(self, path: Path) -> None:
        """Load sections from CSV file."""
        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for row_number, row in enumerate(reader, start=2):
                try:
                    section = Section.from_dict(
                        {key: (value or "").strip() for key, value in row.items() if key}
                    )
                except (KeyError, ValueError) as e:
                    raise InvalidDataError(str(e), source=path.name, row=row_number) from e

                if section.required_capacity < 0:
                    raise InvalidDataError(
                        f"negative capacity for section '{section.id}'",
                        source=path.name,
                        row=row_number,
                    )
                if section.id in self._by_id:
                    raise InvalidDataError(
                        f"duplicate section id '{section.id}'",
                        source=path.name,
                        row=row_number,
                    )
                self.sections.append(section)
                self._by_id[section.id] = section

    def get_section(self, section_id: str) -> Section | None:
        """Get a section by id."""
        return self._by_id.get(section_id)

    def get_sections(self, semester: str, year: int) -> list[Section]:
        """Get sections offered in a term, in file order."""
        return [s for s in self.sections if s.semester == semester and s.year == year]

    def get_terms(self) -> dict[tuple[str, int], int]:
        """Count sections per (semester, year)."""
        return dict(Counter((s.semester, s.year) for s in self.sections))
