"""Configuration loaders for the scheduler."""

from .classrooms import ClassroomConfig
from .enrollments import EnrollmentConfig
from .loader import DEFAULT_CONFIG_DIR, ConfigLoader
from .sections import SectionConfig

__all__ = [
    "ConfigLoader",
    "ClassroomConfig",
    "SectionConfig",
    "EnrollmentConfig",
    "DEFAULT_CONFIG_DIR",
]
