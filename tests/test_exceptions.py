"""Tests for scheduler exceptions."""

import pytest

from course_scheduler.exceptions import (
    InvalidDataError,
    InvalidSemesterError,
    InvalidYearError,
    NoClassroomsError,
    NoSectionsError,
    PersistenceError,
    SchedulingError,
    SchedulingStateError,
)


class TestExceptions:
    """Tests for error codes and messages."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (NoSectionsError(), "NO_SECTIONS"),
            (NoClassroomsError(), "NO_CLASSROOMS"),
            (InvalidSemesterError("Winter", ("Fall", "Spring")), "INVALID_SEMESTER"),
            (InvalidYearError(1990, 2020, 2100), "INVALID_YEAR"),
            (InvalidDataError("bad"), "INVALID_DATA"),
            (SchedulingStateError("bad"), "STATE_ERROR"),
            (PersistenceError("bad"), "PERSISTENCE_ERROR"),
        ],
    )
    def test_codes(self, error, code):
        assert isinstance(error, SchedulingError)
        assert error.code == code

    def test_no_sections_message(self):
        assert str(NoSectionsError()) == "No sections found for scheduling"
        assert str(NoSectionsError("Fall", 2025)) == "No sections found for scheduling in Fall 2025"

    def test_invalid_semester_message(self):
        error = InvalidSemesterError("Winter", ("Fall", "Spring", "Summer"))
        assert error.message == "Invalid semester 'Winter'. Must be one of: Fall, Spring, Summer"

    def test_invalid_data_location(self):
        error = InvalidDataError("bad capacity", source="classrooms.csv", row=4)
        assert str(error) == "Invalid data in 'classrooms.csv' at row 4: bad capacity"
        assert error.row == 4
