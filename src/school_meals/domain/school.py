"""School domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Student:
    """Represents a student stored in the database."""

    id: str
    student_id: str
    student_name: str
    created_at: datetime | None = None
