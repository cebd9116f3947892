"""Custom exceptions for the course scheduler."""


class SchedulingError(Exception):
    """Base exception for scheduler errors."""

    code = "SCHEDULING_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NoSectionsError(SchedulingError):
    """No sections to schedule for the requested term."""

    code = "NO_SECTIONS"

    def __init__(self, semester: str | None = None, year: int | None = None):
        self.semester = semester
        self.year = year
        message = "No sections found for scheduling"
        if semester and year:
            message += f" in {semester} {year}"
        super().__init__(message)


class NoClassroomsError(SchedulingError):
    """No active classrooms are available."""

    code = "NO_CLASSROOMS"

    def __init__(self):
        super().__init__("No classrooms available")


class InvalidSemesterError(SchedulingError):
    """Semester name is not recognised."""

    code = "INVALID_SEMESTER"

    def __init__(self, semester: str, valid: tuple[str, ...]):
        self.semester = semester
        super().__init__(
            f"Invalid semester '{semester}'. Must be one of: {', '.join(valid)}"
        )


class InvalidYearError(SchedulingError):
    """Academic year is outside the supported range."""

    code = "INVALID_YEAR"

    def __init__(self, year: int, min_year: int, max_year: int):
        self.year = year
        super().__init__(f"Invalid year {year}. Must be between {min_year} and {max_year}")


class InvalidDataError(SchedulingError):
    """Reference data validation failed."""

    code = "INVALID_DATA"

    def __init__(self, message: str, source: str | None = None, row: int | None = None):
        self.source = source
        self.row = row
        location = ""
        if source:
            location += f" in '{source}'"
        if row is not None:
            location += f" at row {row}"
        super().__init__(f"Invalid data{location}: {message}")


class SchedulingStateError(SchedulingError):
    """An assign/unassign call would break the scheduling state."""

    code = "STATE_ERROR"


class PersistenceError(SchedulingError):
    """Schedule could not be stored."""

    code = "PERSISTENCE_ERROR"
