"""Supabase implementation for student lookups."""

from dataclasses import dataclass

from supabase import Client

from school_meals.adapters.supabase_rows import parse_datetime, store_errors
from school_meals.domain.school import Student
from school_meals.services.students import StudentRepository


@dataclass
class SupabaseStudentRepository(StudentRepository):
    """Supabase-backed repository for students."""

    client: Client

    def find_by_student_id(self, student_id: str) -> Student | None:
        with store_errors("find student"):
            response = (
                self.client.table("students")
                .select("*")
                .eq("student_id", student_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        return Student(
            id=str(row["id"]),
            student_id=str(row.get("student_id", "")),
            student_name=str(row.get("student_name", "")),
            created_at=parse_datetime(row.get("created_at")),
        )
