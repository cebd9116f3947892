"""Constants for schedule generation."""

from .models import Day, TimeSlot

# Teaching days in scheduling order
DAYS: tuple[Day, ...] = (
    Day.MONDAY,
    Day.TUESDAY,
    Day.WEDNESDAY,
    Day.THURSDAY,
    Day.FRIDAY,
)

# Time slots definition
# Each slot is 50 minutes with a 10 minute break
TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot(1, "08:00", "08:50"),
    TimeSlot(2, "09:00", "09:50"),
    TimeSlot(3, "10:00", "10:50"),
    TimeSlot(4, "11:00", "11:50"),
    TimeSlot(5, "12:00", "12:50"),  # Lunch
    TimeSlot(6, "13:00", "13:50"),
    TimeSlot(7, "14:00", "14:50"),
    TimeSlot(8, "15:00", "15:50"),
    TimeSlot(9, "16:00", "16:50"),
    TimeSlot(10, "17:00", "17:50"),
)

VALID_SEMESTERS = ("Fall", "Spring", "Summer")
MIN_YEAR = 2020
MAX_YEAR = 2100

# Maximum number of search nodes per run. Keeps exponential worst cases bounded
# while staying deterministic (unlike a wall-clock limit).
DEFAULT_NODE_LIMIT = 200_000

# Wall-clock limit in seconds; None disables it
DEFAULT_TIME_LIMIT: float | None = None

# Human-readable failure reasons
NO_VALID_ASSIGNMENT_REASON = "No valid time slot and classroom combination available"
NO_CLASSROOM_CAPACITY_REASON = (
    "No classroom with sufficient capacity (requires {required} seats, "
    "largest available has {largest})"
)
SEARCH_ABORTED_REASON = "Search stopped after {nodes} nodes before this section was placed"

# Status of enrollments that count towards student conflicts
ENROLLED_STATUS = "enrolled"


def get_time_slot(slot_id: int) -> TimeSlot | None:
    """Get a time slot by id."""
    for slot in TIME_SLOTS:
        if slot.id == slot_id:
            return slot
    return None


def get_time_slot_range(slot_id: int) -> str:
    """Get time range string for a slot (e.g., '08:00 - 08:50')."""
    slot = get_time_slot(slot_id)
    if slot:
        return slot.label
    return ""
