"""Meal session and attendance services."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from school_meals.domain.errors import NotFoundError, ValidationError
from school_meals.domain.meals import (
    AttendanceStatus,
    MealAttendance,
    MealSession,
    MealSessionStatus,
)


class MealSessionRepository(Protocol):
    """Persistence interface for meal sessions."""

    def create(self, payload: dict[str, object]) -> MealSession:
        """Create a meal session and return it."""

    def find_by_id(self, session_id: str) -> MealSession | None:
        """Return a meal session by id, if present."""

    def find_many(
        self,
        school_id: str | None = None,
        on_date: date | None = None,
        status: str | None = None,
    ) -> list[MealSession]:
        """Return sessions matching the filters, latest date first."""

    def update(self, session_id: str, payload: dict[str, object]) -> MealSession | None:
        """Update a meal session and return it."""


class MealAttendanceRepository(Protocol):
    """Persistence interface for meal attendance."""

    def create(self, payload: dict[str, object]) -> MealAttendance:
        """Create an attendance record and return it."""

    def find_many(
        self, meal_session_id: str | None = None, student_id: str | None = None
    ) -> list[MealAttendance]:
        """Return attendance records, most recently served first."""

    def count_present(self, meal_session_id: str) -> int:
        """Count PRESENT records for a meal session."""


@dataclass
class MealSessionService:
    """Application service for meal sessions."""

    repository: MealSessionRepository

    def create_session(self, payload: Mapping[str, object]) -> MealSession:
        if not all(payload.get(key) for key in ("date", "meal_type", "school_id")):
            raise ValidationError("date, mealType and schoolId are required")
        data = {
            "planned_headcount": 0,
            "actual_served_count": 0,
            "wastage_count": 0,
            "status": MealSessionStatus.PLANNED,
            **{key: value for key, value in payload.items() if value is not None},
        }
        return self.repository.create(data)

    def list_sessions(
        self,
        school_id: str | None = None,
        on_date: date | None = None,
        status: str | None = None,
    ) -> list[MealSession]:
        return self.repository.find_many(
            school_id=school_id, on_date=on_date, status=status
        )

    def get_session(self, session_id: str) -> MealSession:
        session = self.repository.find_by_id(session_id)
        if session is None:
            raise NotFoundError(f"Meal session with ID {session_id} not found")
        return session


@dataclass
class MealAttendanceService:
    """Records which students attended a meal session."""

    repository: MealAttendanceRepository
    session_service: MealSessionService

    def mark_attendance(self, payload: Mapping[str, object]) -> MealAttendance:
        """Record attendance; a present student counts as served."""
        student_id = payload.get("student_id")
        meal_session_id = payload.get("meal_session_id")
        if not student_id or not meal_session_id:
            raise ValidationError("studentId and mealSessionId are required")
        session = self.session_service.get_session(str(meal_session_id))
        status = AttendanceStatus(payload.get("status") or AttendanceStatus.PRESENT)
        attendance = self.repository.create(
            {
                "student_id": str(student_id),
                "meal_session_id": session.id,
                "status": status,
                "served_at": payload.get("served_at") or datetime.now(tz=UTC),
                "notes": payload.get("notes"),
            }
        )
        if status is AttendanceStatus.PRESENT:
            # The served count mirrors the PRESENT records for the session.
            served = self.repository.count_present(session.id)
            self.session_service.repository.update(
                session.id, {"actual_served_count": served}
            )
        return attendance

    def list_attendance(
        self, meal_session_id: str | None = None, student_id: str | None = None
    ) -> list[MealAttendance]:
        return self.repository.find_many(
            meal_session_id=meal_session_id, student_id=student_id
        )
