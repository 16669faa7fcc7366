"""Domain models for meal distribution."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

MEAL_TYPES = ("breakfast", "lunch")


class MealSessionStatus(StrEnum):
    PLANNED = "PLANNED"
    CONFIRMED = "CONFIRMED"
    SERVED = "SERVED"


class AttendanceStatus(StrEnum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"
    NO_SHOW = "NO_SHOW"


@dataclass(frozen=True)
class MealSession:
    """A planned serving of one meal to a school, grade or class."""

    id: str
    date: date
    meal_type: str
    school_id: str
    grade: str | None
    class_name: str | None
    planned_headcount: int
    actual_served_count: int
    wastage_count: int
    status: MealSessionStatus
    menu_id: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MealAttendance:
    """A student's attendance record for a meal session."""

    id: str
    student_id: str
    meal_session_id: str
    status: AttendanceStatus
    served_at: datetime
    notes: str | None
    created_at: datetime | None = None
