"""Test fixtures for course scheduler tests."""

from pathlib import Path

import pytest

from course_scheduler.scheduler.models import Classroom, Day, Section, TimeSlot

ONE_DAY = (Day.MONDAY,)
ONE_SLOT = (TimeSlot(1, "08:00", "08:50"),)


@pytest.fixture
def single_cell():
    """A catalog with one day and one time slot."""
    return ONE_DAY, ONE_SLOT


@pytest.fixture
def room_30():
    return Classroom(id="R1", capacity=30, building="Main", room_number="101")


@pytest.fixture
def two_rooms():
    return [
        Classroom(id="R1", capacity=40, building="Main", room_number="101"),
        Classroom(id="R2", capacity=25, building="Main", room_number="102"),
    ]


@pytest.fixture
def shared_instructor_sections():
    """Two sections of 20 seats taught by the same instructor."""
    return [
        Section(id="S1", required_capacity=20, instructor_id="I1", course_code="CS101"),
        Section(id="S2", required_capacity=20, instructor_id="I1", course_code="CS102"),
    ]


@pytest.fixture
def independent_sections():
    """Two sections with different instructors and no shared students."""
    return [
        Section(id="S1", required_capacity=20, instructor_id="I1", course_code="CS101"),
        Section(id="S2", required_capacity=20, instructor_id="I2", course_code="MA101"),
    ]


@pytest.fixture
def sample_sections():
    """A small Fall 2025 term plus one Spring section."""
    return [
        Section(
            id="CS101-1",
            required_capacity=35,
            instructor_id="I1",
            course_code="CS101",
            course_name="Intro to Programming",
            section_number="1",
            instructor_name="Ada Lovelace",
            semester="Fall",
            year=2025,
        ),
        Section(
            id="CS101-2",
            required_capacity=20,
            instructor_id="I1",
            course_code="CS101",
            course_name="Intro to Programming",
            section_number="2",
            instructor_name="Ada Lovelace",
            semester="Fall",
            year=2025,
        ),
        Section(
            id="MA101-1",
            required_capacity=25,
            instructor_id="I2",
            course_code="MA101",
            course_name="Calculus I",
            section_number="1",
            instructor_name="Carl Gauss",
            semester="Fall",
            year=2025,
        ),
        Section(
            id="PH101-1",
            required_capacity=30,
            instructor_id=None,
            course_code="PH101",
            course_name="Physics I",
            section_number="1",
            semester="Fall",
            year=2025,
        ),
        Section(
            id="CS201-1",
            required_capacity=20,
            instructor_id="I1",
            course_code="CS201",
            course_name="Data Structures",
            section_number="1",
            instructor_name="Ada Lovelace",
            semester="Spring",
            year=2026,
        ),
    ]


@pytest.fixture
def sample_classrooms():
    return [
        Classroom(id="R1", capacity=40, building="Main", room_number="101"),
        Classroom(id="R2", capacity=25, building="Main", room_number="102"),
        Classroom(id="R3", capacity=100, building="Annex", room_number="1", is_active=False),
    ]


@pytest.fixture
def sample_enrollments():
    """(student_id, section_id) pairs; ST1 and ST2 take CS101-1 and MA101-1."""
    return [
        ("ST1", "CS101-1"),
        ("ST1", "MA101-1"),
        ("ST2", "CS101-1"),
        ("ST2", "MA101-1"),
        ("ST3", "PH101-1"),
        ("ST3", "CS201-1"),
    ]


CLASSROOMS_CSV = """id,building,room_number,capacity,is_active
R1,Main,101,40,true
R2,Main,102,25,true
R3,Annex,1,100,false
"""

SECTIONS_CSV = """id,course_code,course_name,section_number,capacity,instructor_id,instructor_name,semester,year
CS101-1,CS101,Intro to Programming,1,35,I1,Ada Lovelace,Fall,2025
CS101-2,CS101,Intro to Programming,2,20,I1,Ada Lovelace,Fall,2025
MA101-1,MA101,Calculus I,1,25,I2,Carl Gauss,Fall,2025
PH101-1,PH101,Physics I,1,30,,,Fall,2025
CS201-1,CS201,Data Structures,1,20,I1,Ada Lovelace,Spring,2026
"""

ENROLLMENTS_CSV = """student_id,section_id,status
ST1,CS101-1,enrolled
ST1,MA101-1,enrolled
ST2,CS101-1,enrolled
ST2,MA101-1,enrolled
ST3,PH101-1,enrolled
ST3,CS201-1,enrolled
ST4,PH101-1,dropped
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A reference data directory with classrooms, sections and enrollments."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "classrooms.csv").write_text(CLASSROOMS_CSV, encoding="utf-8")
    (directory / "sections.csv").write_text(SECTIONS_CSV, encoding="utf-8")
    (directory / "enrollments.csv").write_text(ENROLLMENTS_CSV, encoding="utf-8")
    return directory
