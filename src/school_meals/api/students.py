"""Student API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from school_meals.api.serializers import student_to_json

if TYPE_CHECKING:
    from school_meals.containers import AppContainer

router = APIRouter(prefix="/api/students", tags=["students"])


@router.get("/{student_id}")
async def get_student(student_id: str, request: Request) -> dict[str, object]:
    """Return a student's profile by school student id."""
    container: AppContainer = request.app.state.container
    student = container.student_service.get_student_profile(student_id)
    return {"success": True, "data": student_to_json(student)}
