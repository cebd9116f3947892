"""Read and write schedule result documents."""

import json
from pathlib import Path

from ..exceptions import PersistenceError
from .models import ScheduleResult

# Keys every exported result document carries
RESULT_KEYS = ("semester", "year", "assignments", "unassigned")


def export_schedule_json(result: ScheduleResult, output_path: Path | str) -> None:
    """Write a run result as indented UTF-8 JSON, creating parent directories."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )


def load_schedule_json(input_path: Path | str) -> dict:
    """Read a result document written by export_schedule_json.

    Raises:
        PersistenceError: If the file cannot be read, is not JSON, or lacks
            one of RESULT_KEYS
    """
    path = Path(input_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise PersistenceError(f"Could not read schedule result {path}: {e}") from e

    if not isinstance(data, dict):
        raise PersistenceError(f"Schedule result {path} is not a JSON object")
    missing = [key for key in RESULT_KEYS if key not in data]
    if missing:
        raise PersistenceError(
            f"Schedule result {path} is missing: {', '.join(missing)}"
        )
    return data
