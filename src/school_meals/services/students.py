"""Student lookup service."""

from dataclasses import dataclass
from typing import Protocol

from school_meals.domain.errors import NotFoundError, ValidationError
from school_meals.domain.school import Student


class StudentRepository(Protocol):
    """Persistence interface for students."""

    def find_by_student_id(self, student_id: str) -> Student | None:
        """Return the student with a school student id, if present."""


@dataclass
class StudentService:
    """Application service for student profiles."""

    repository: StudentRepository

    def get_student_profile(self, student_id: str) -> Student:
        if not student_id or not student_id.strip():
            raise ValidationError("Valid studentId is required")
        student = self.repository.find_by_student_id(student_id.strip())
        if student is None:
            raise NotFoundError("Student not found")
        return student
