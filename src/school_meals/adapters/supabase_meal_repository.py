"""Supabase implementation for meal sessions and attendance."""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from supabase import Client

from school_meals.adapters.supabase_rows import (
    parse_date,
    parse_datetime,
    parse_record_id,
    store_errors,
    to_row,
)
from school_meals.domain.errors import PersistenceError
from school_meals.domain.meals import (
    AttendanceStatus,
    MealAttendance,
    MealSession,
    MealSessionStatus,
)
from school_meals.services.meals import MealAttendanceRepository, MealSessionRepository

_SESSIONS = "meal_sessions"
_ATTENDANCE = "meal_attendance"


@dataclass
class SupabaseMealSessionRepository(MealSessionRepository):
    """Supabase-backed repository for meal sessions."""

    client: Client

    def create(self, payload: dict[str, object]) -> MealSession:
        with store_errors("create meal session"):
            response = self.client.table(_SESSIONS).insert(to_row(payload)).execute()
        if not response.data:
            raise PersistenceError("Failed to create meal session: no row returned")
        return _parse_session(response.data[0])

    def find_by_id(self, session_id: str) -> MealSession | None:
        record_id = parse_record_id(session_id)
        if record_id is None:
            return None
        with store_errors("find meal session"):
            response = (
                self.client.table(_SESSIONS)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def find_many(
        self,
        school_id: str | None = None,
        on_date: date | None = None,
        status: str | None = None,
    ) -> list[MealSession]:
        query = self.client.table(_SESSIONS).select("*")
        if school_id:
            query = query.eq("school_id", school_id)
        if on_date is not None:
            query = query.eq("date", on_date.isoformat())
        if status:
            query = query.eq("status", str(status))
        with store_errors("list meal sessions"):
            response = query.order("date", desc=True).execute()
        return [_parse_session(row) for row in response.data or []]

    def update(self, session_id: str, payload: dict[str, object]) -> MealSession | None:
        record_id = parse_record_id(session_id)
        if record_id is None:
            return None
        row = {**to_row(payload), "updated_at": datetime.now(tz=UTC).isoformat()}
        with store_errors("update meal session"):
            response = (
                self.client.table(_SESSIONS).update(row).eq("id", record_id).execute()
            )
        if not response.data:
            return None
        return _parse_session(response.data[0])


@dataclass
class SupabaseMealAttendanceRepository(MealAttendanceRepository):
    """Supabase-backed repository for meal attendance records."""

    client: Client

    def create(self, payload: dict[str, object]) -> MealAttendance:
        with store_errors("record meal attendance"):
            response = (
                self.client.table(_ATTENDANCE).insert(to_row(payload)).execute()
            )
        if not response.data:
            raise PersistenceError("Failed to record meal attendance: no row returned")
        return _parse_attendance(response.data[0])

    def find_many(
        self, meal_session_id: str | None = None, student_id: str | None = None
    ) -> list[MealAttendance]:
        query = self.client.table(_ATTENDANCE).select("*")
        if meal_session_id:
            record_id = parse_record_id(meal_session_id)
            if record_id is None:
                return []
            query = query.eq("meal_session_id", record_id)
        if student_id:
            query = query.eq("student_id", student_id)
        with store_errors("list meal attendance"):
            response = query.order("served_at", desc=True).execute()
        return [_parse_attendance(row) for row in response.data or []]

    def count_present(self, meal_session_id: str) -> int:
        record_id = parse_record_id(meal_session_id)
        if record_id is None:
            return 0
        with store_errors("count meal attendance"):
            response = (
                self.client.table(_ATTENDANCE)
                .select("id", count="exact")
                .eq("meal_session_id", record_id)
                .eq("status", AttendanceStatus.PRESENT.value)
                .limit(1)
                .execute()
            )
        return response.count or 0


def _parse_session(row: dict[str, object]) -> MealSession:
    return MealSession(
        id=str(row["id"]),
        date=parse_date(row.get("date")),
        meal_type=str(row.get("meal_type", "")),
        school_id=str(row.get("school_id", "")),
        grade=row.get("grade"),
        class_name=row.get("class_name"),
        planned_headcount=int(row.get("planned_headcount") or 0),
        actual_served_count=int(row.get("actual_served_count") or 0),
        wastage_count=int(row.get("wastage_count") or 0),
        status=MealSessionStatus(row.get("status") or MealSessionStatus.PLANNED),
        menu_id=row.get("menu_id"),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )


def _parse_attendance(row: dict[str, object]) -> MealAttendance:
    return MealAttendance(
        id=str(row["id"]),
        student_id=str(row.get("student_id", "")),
        meal_session_id=str(row.get("meal_session_id", "")),
        status=AttendanceStatus(row.get("status") or AttendanceStatus.PRESENT),
        served_at=parse_datetime(row.get("served_at")),
        notes=row.get("notes"),
        created_at=parse_datetime(row.get("created_at")),
    )
