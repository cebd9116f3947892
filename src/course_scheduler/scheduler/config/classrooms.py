"""Classroom configuration loader."""

import csv
from pathlib import Path

from ...exceptions import InvalidDataError
from ..models import Classroom


def _parse_bool(value: str | None, default: bool = True) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("true", "1", "yes")


class ClassroomConfig:
    """Loader for classrooms from classrooms.csv.

    Expected columns: id, building, room_number, capacity, is_active
    """

    def __init__(self, classrooms_path: Path | None = None):
        self.classrooms: list[Classroom] = []
        self._by_id: dict[str, Classroom] = {}

        if classrooms_path and classrooms_path.exists():
            self._load(classrooms_path)

    def _load(self, path: Path) -> None:
        """Load classrooms from CSV file."""
        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            # Row 1 is the header
            for row_number, row in enumerate(reader, start=2):
                try:
                    classroom = Classroom(
                        id=row["id"].strip(),
                        capacity=int(row["capacity"]),
                        building=row.get("building", "").strip(),
                        room_number=(row.get("room_number") or "").strip(),
                        is_active=_parse_bool(row.get("is_active")),
                    )
                except (KeyError, ValueError, AttributeError) as e:
                    raise InvalidDataError(str(e), source=path.name, row=row_number) from e

                if classroom.id in self._by_id:
                    raise InvalidDataError(
                        f"duplicate classroom id '{classroom.id}'",
                        source=path.name,
                        row=row_number,
                    )
                self.classrooms.append(classroom)
                self._by_id[classroom.id] = classroom

    def get_classroom(self, classroom_id: str) -> Classroom | None:
        """Get a classroom by id."""
        return self._by_id.get(classroom_id)

    def get_active_classrooms(self) -> list[Classroom]:
        """Get classrooms that can be scheduled."""
        return [c for c in self.classrooms if c.is_active]
