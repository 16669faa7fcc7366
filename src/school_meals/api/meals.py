"""Meal session and attendance API endpoints."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request, status

from school_meals.api.schemas import MealAttendanceIn, MealSessionIn
from school_meals.api.serializers import meal_attendance_to_json, meal_session_to_json
from school_meals.domain.meals import MealSessionStatus

if TYPE_CHECKING:
    from school_meals.containers import AppContainer

sessions_router = APIRouter(prefix="/api/meal-sessions", tags=["meal-sessions"])
attendance_router = APIRouter(prefix="/api/meal-attendance", tags=["meal-attendance"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@sessions_router.get("")
async def list_sessions(
    request: Request,
    school_id: str | None = Query(default=None, alias="schoolId"),
    on_date: date | None = Query(default=None, alias="date"),
    session_status: MealSessionStatus | None = Query(default=None, alias="status"),
) -> dict[str, object]:
    """List meal sessions, latest date first."""
    sessions = _container(request).meal_session_service.list_sessions(
        school_id=school_id, on_date=on_date, status=session_status
    )
    return {
        "success": True,
        "count": len(sessions),
        "data": [meal_session_to_json(session) for session in sessions],
    }


@sessions_router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(body: MealSessionIn, request: Request) -> dict[str, object]:
    session = _container(request).meal_session_service.create_session(
        body.model_dump()
    )
    return {
        "success": True,
        "message": "Meal session created successfully",
        "data": meal_session_to_json(session),
    }


@sessions_router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict[str, object]:
    session = _container(request).meal_session_service.get_session(session_id)
    return {"success": True, "data": meal_session_to_json(session)}


@attendance_router.get("")
async def list_attendance(
    request: Request,
    meal_session_id: str | None = Query(default=None, alias="mealSessionId"),
    student_id: str | None = Query(default=None, alias="studentId"),
) -> dict[str, object]:
    """List attendance records, most recently served first."""
    records = _container(request).meal_attendance_service.list_attendance(
        meal_session_id=meal_session_id, student_id=student_id
    )
    return {
        "success": True,
        "count": len(records),
        "data": [meal_attendance_to_json(record) for record in records],
    }


@attendance_router.post("", status_code=status.HTTP_201_CREATED)
async def mark_attendance(
    body: MealAttendanceIn, request: Request
) -> dict[str, object]:
    """Record a student's attendance for a meal session."""
    record = _container(request).meal_attendance_service.mark_attendance(
        body.model_dump()
    )
    return {
        "success": True,
        "message": "Meal attendance recorded successfully",
        "data": meal_attendance_to_json(record),
    }
