"""Unified configuration loader."""

from pathlib import Path

from .classrooms import ClassroomConfig
from .enrollments import EnrollmentConfig
from .sections import SectionConfig

DEFAULT_CONFIG_DIR = Path("data")


class ConfigLoader:
    """Unified loader for all scheduling reference data."""

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Path to directory containing reference data files.
                       Expected files:
                       - classrooms.csv
                       - sections.csv
                       - enrollments.csv
                       Missing files are treated as empty.
        """
        if config_dir is None:
            config_dir = DEFAULT_CONFIG_DIR

        self.config_dir = Path(config_dir)

        self.classrooms = ClassroomConfig(self._get_path("classrooms.csv"))
        self.sections = SectionConfig(self._get_path("sections.csv"))
        self.enrollments = EnrollmentConfig(self._get_path("enrollments.csv"))

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        path = self.config_dir / filename
        return path if path.exists() else None
