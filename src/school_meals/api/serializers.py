"""camelCase JSON views of domain objects."""

from datetime import date, datetime

from school_meals.domain.inventory import InventoryItem
from school_meals.domain.meals import MealAttendance, MealSession
from school_meals.domain.pagination import Page
from school_meals.domain.recipe import Recipe
from school_meals.domain.school import Student
from school_meals.services.inventory import InventoryStats


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def recipe_to_json(recipe: Recipe, nutrition_version: int = 1) -> dict[str, object]:
    """Serialize a recipe; nutrition keys follow the configured version."""
    nutrition = recipe.nutritional_info
    return {
        "id": recipe.id,
        "name": recipe.name,
        "description": recipe.description,
        "ingredients": [ingredient.to_json() for ingredient in recipe.ingredients],
        "instructions": recipe.instructions,
        "servingSize": recipe.serving_size,
        "nutritionalInfo": (
            nutrition.to_json(version=nutrition_version) if nutrition else None
        ),
        "dietaryFlags": recipe.dietary_flags.to_json(),
        "dietaryLabels": recipe.dietary_flags.get_active_flags(),
        "allergens": list(recipe.allergens),
        "prepTime": recipe.prep_time,
        "seasonal": list(recipe.seasonal),
        "isActive": recipe.is_active,
        "createdAt": _iso(recipe.created_at),
        "updatedAt": _iso(recipe.updated_at),
    }


def recipe_page_to_json(
    page: Page[Recipe], nutrition_version: int = 1
) -> dict[str, object]:
    return {
        "items": [recipe_to_json(recipe, nutrition_version) for recipe in page.items],
        "total": page.total,
        "page": page.page,
        "totalPages": page.total_pages,
    }


def inventory_item_to_json(item: InventoryItem) -> dict[str, object]:
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "category": item.category.value,
        "quantity": item.quantity,
        "unit": item.unit,
        "reorderLevel": item.reorder_level,
        "unitPrice": item.unit_price,
        "supplier": item.supplier,
        "location": item.location,
        "expiryDate": _iso(item.expiry_date),
        "status": item.status.value,
        "createdAt": _iso(item.created_at),
        "updatedAt": _iso(item.updated_at),
    }


def inventory_stats_to_json(stats: InventoryStats) -> dict[str, int]:
    return {
        "total": stats.total,
        "active": stats.active,
        "lowStock": stats.low_stock,
        "outOfStock": stats.out_of_stock,
        "expired": stats.expired,
    }


def meal_session_to_json(session: MealSession) -> dict[str, object]:
    return {
        "id": session.id,
        "date": _iso(session.date),
        "mealType": session.meal_type,
        "schoolId": session.school_id,
        "grade": session.grade,
        "className": session.class_name,
        "plannedHeadcount": session.planned_headcount,
        "actualServedCount": session.actual_served_count,
        "wastageCount": session.wastage_count,
        "status": session.status.value,
        "menuId": session.menu_id,
    }


def meal_attendance_to_json(attendance: MealAttendance) -> dict[str, object]:
    return {
        "id": attendance.id,
        "studentId": attendance.student_id,
        "mealSessionId": attendance.meal_session_id,
        "status": attendance.status.value,
        "servedAt": _iso(attendance.served_at),
        "notes": attendance.notes,
    }


def student_to_json(student: Student) -> dict[str, object]:
    return {
        "id": student.id,
        "studentId": student.student_id,
        "studentName": student.student_name,
    }
