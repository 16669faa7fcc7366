"""Shared test fixtures."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from school_meals.adapters.fdc_client import FdcClient
from school_meals.config import Settings
from school_meals.containers import AppContainer
from school_meals.domain.dietary import required_flags
from school_meals.domain.inventory import (
    InventoryCategory,
    InventoryItem,
    InventoryStatus,
)
from school_meals.domain.meals import (
    AttendanceStatus,
    MealAttendance,
    MealSession,
    MealSessionStatus,
)
from school_meals.domain.nutrition import NutritionalInfo
from school_meals.domain.pagination import Page, Pagination
from school_meals.domain.recipe import Ingredient, Recipe
from school_meals.domain.school import Student
from school_meals.services.inventory import InventoryItemService, InventoryRepository
from school_meals.services.meals import (
    MealAttendanceRepository,
    MealAttendanceService,
    MealSessionRepository,
    MealSessionService,
)
from school_meals.services.nutrition import NutritionCalculator
from school_meals.services.recipes import (
    CreateRecipeUseCase,
    RecipeRepository,
    RecipeService,
)
from school_meals.services.students import StudentRepository, StudentService


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[str, Recipe] = field(default_factory=dict)

    def save(self, recipe: Recipe) -> Recipe:
        # Later saves sort as newer even within one clock tick.
        created_at = _now() + timedelta(microseconds=len(self.recipes))
        stored = replace(
            recipe, id=str(uuid4()), created_at=created_at, updated_at=created_at
        )
        self.recipes[stored.id] = stored
        return replace(stored)

    def find_by_id(self, recipe_id: str) -> Recipe | None:
        recipe = self.recipes.get(recipe_id)
        return replace(recipe) if recipe is not None else None

    def find_all(
        self, filters: Mapping[str, object] | None, pagination: Pagination
    ) -> Page[Recipe]:
        matching = self._active_with_flags(filters)
        items = matching[pagination.skip : pagination.skip + pagination.limit]
        return Page.build(items, len(matching), pagination)

    def update(self, recipe_id: str, changes: dict[str, object]) -> Recipe | None:
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            return None
        updated = replace(recipe, **changes, updated_at=_now())
        self.recipes[recipe_id] = updated
        return replace(updated)

    def delete(self, recipe_id: str) -> Recipe | None:
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            return None
        recipe.mark_as_inactive()
        return replace(recipe)

    def search_by_ingredient(self, text: str) -> list[Recipe]:
        needle = text.lower()
        return [
            recipe
            for recipe in self._active_with_flags(None)
            if any(needle in item.name.lower() for item in recipe.ingredients)
        ]

    def find_by_dietary_flags(self, flags: Mapping[str, object]) -> list[Recipe]:
        return self._active_with_flags(flags)

    def _active_with_flags(self, filters: Mapping[str, object] | None) -> list[Recipe]:
        attributes = required_flags(filters)
        matching = [
            recipe
            for recipe in self.recipes.values()
            if recipe.is_active
            and all(getattr(recipe.dietary_flags, name) for name in attributes)
        ]
        return sorted(matching, key=lambda recipe: recipe.created_at, reverse=True)


@dataclass
class InMemoryInventoryRepository(InventoryRepository):
    """In-memory inventory repository for tests."""

    items: dict[str, InventoryItem] = field(default_factory=dict)

    def create(self, payload: dict[str, object]) -> InventoryItem:
        created_at = _now() + timedelta(microseconds=len(self.items))
        item = InventoryItem(
            id=str(uuid4()),
            name=str(payload["name"]),
            description=str(payload.get("description", "")),
            category=InventoryCategory(payload.get("category", "OTHER")),
            quantity=float(payload.get("quantity", 0)),
            unit=str(payload.get("unit", "pieces")),
            reorder_level=float(payload.get("reorder_level", 10)),
            unit_price=float(payload.get("unit_price", 0)),
            supplier=str(payload.get("supplier", "")),
            location=str(payload.get("location", "")),
            expiry_date=payload.get("expiry_date"),
            status=InventoryStatus(payload["status"]),
            created_at=created_at,
            updated_at=created_at,
        )
        self.items[item.id] = item
        return item

    def find_by_id(self, item_id: str) -> InventoryItem | None:
        return self.items.get(item_id)

    def find_many(
        self,
        category: str | None = None,
        status: str | None = None,
        name_contains: str | None = None,
    ) -> list[InventoryItem]:
        matching = [
            item
            for item in self.items.values()
            if (category is None or item.category == category)
            and (status is None or item.status == status)
            and (name_contains is None or name_contains.lower() in item.name.lower())
        ]
        return sorted(matching, key=lambda item: item.created_at, reverse=True)

    def update(self, item_id: str, payload: dict[str, object]) -> InventoryItem | None:
        item = self.items.get(item_id)
        if item is None:
            return None
        changes = dict(payload)
        if "category" in changes:
            changes["category"] = InventoryCategory(changes["category"])
        updated = replace(item, **changes, updated_at=_now())
        self.items[item_id] = updated
        return updated

    def delete(self, item_id: str) -> InventoryItem | None:
        return self.items.pop(item_id, None)

    def count(self, status: str | None = None) -> int:
        return len(self.find_many(status=status))

    def find_low_stock(self) -> list[InventoryItem]:
        low = [
            item
            for item in self.items.values()
            if item.quantity <= item.reorder_level
        ]
        return sorted(low, key=lambda item: item.quantity)

    def find_by_category(self, category: str) -> list[InventoryItem]:
        return sorted(
            self.find_many(category=category), key=lambda item: item.name
        )


@dataclass
class InMemoryMealSessionRepository(MealSessionRepository):
    """In-memory meal session repository for tests."""

    sessions: dict[str, MealSession] = field(default_factory=dict)

    def create(self, payload: dict[str, object]) -> MealSession:
        session = MealSession(
            id=str(uuid4()),
            date=payload["date"],
            meal_type=str(payload["meal_type"]),
            school_id=str(payload["school_id"]),
            grade=payload.get("grade"),
            class_name=payload.get("class_name"),
            planned_headcount=int(payload.get("planned_headcount", 0)),
            actual_served_count=int(payload.get("actual_served_count", 0)),
            wastage_count=int(payload.get("wastage_count", 0)),
            status=MealSessionStatus(payload.get("status", "PLANNED")),
            menu_id=payload.get("menu_id"),
            created_at=_now(),
        )
        self.sessions[session.id] = session
        return session

    def find_by_id(self, session_id: str) -> MealSession | None:
        return self.sessions.get(session_id)

    def find_many(
        self,
        school_id: str | None = None,
        on_date: date | None = None,
        status: str | None = None,
    ) -> list[MealSession]:
        matching = [
            session
            for session in self.sessions.values()
            if (school_id is None or session.school_id == school_id)
            and (on_date is None or session.date == on_date)
            and (status is None or session.status == status)
        ]
        return sorted(matching, key=lambda session: session.date, reverse=True)

    def update(self, session_id: str, payload: dict[str, object]) -> MealSession | None:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        updated = replace(session, **payload, updated_at=_now())
        self.sessions[session_id] = updated
        return updated


@dataclass
class InMemoryMealAttendanceRepository(MealAttendanceRepository):
    """In-memory attendance repository for tests."""

    records: list[MealAttendance] = field(default_factory=list)

    def create(self, payload: dict[str, object]) -> MealAttendance:
        record = MealAttendance(
            id=str(uuid4()),
            student_id=str(payload["student_id"]),
            meal_session_id=str(payload["meal_session_id"]),
            status=AttendanceStatus(payload["status"]),
            served_at=payload["served_at"],
            notes=payload.get("notes"),
            created_at=_now(),
        )
        self.records.append(record)
        return record

    def find_many(
        self, meal_session_id: str | None = None, student_id: str | None = None
    ) -> list[MealAttendance]:
        matching = [
            record
            for record in self.records
            if (meal_session_id is None or record.meal_session_id == meal_session_id)
            and (student_id is None or record.student_id == student_id)
        ]
        return sorted(matching, key=lambda record: record.served_at, reverse=True)

    def count_present(self, meal_session_id: str) -> int:
        return sum(
            1
            for record in self.records
            if record.meal_session_id == meal_session_id
            and record.status is AttendanceStatus.PRESENT
        )


@dataclass
class InMemoryStudentRepository(StudentRepository):
    """In-memory student repository for tests."""

    students: dict[str, Student] = field(default_factory=dict)

    def add(self, student_id: str, student_name: str) -> Student:
        student = Student(
            id=str(uuid4()), student_id=student_id, student_name=student_name
        )
        self.students[student_id] = student
        return student

    def find_by_student_id(self, student_id: str) -> Student | None:
        return self.students.get(student_id)


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_calls: list[str] = field(default_factory=list)
    food_calls: list[int] = field(default_factory=list)
    nutrient_requests: list[tuple[str, ...]] = field(default_factory=list)
    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broiler or fryers, breast, raw",
                    "dataType": "SR Legacy",
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 171077,
            "description": "Chicken, broiler or fryers, breast, raw",
            "dataType": "SR Legacy",
            "foodNutrients": [
                {"nutrient": {"id": 1008, "number": "208"}, "amount": 120},
                {"nutrient": {"id": 1003, "number": "203"}, "amount": 22.5},
                {"nutrient": {"id": 1004, "number": "204"}, "amount": 2.6},
                {"nutrient": {"id": 1005, "number": "205"}, "amount": 0},
                {"nutrient": {"id": 1079, "number": "291"}, "amount": 0},
                {"nutrient": {"id": 2000, "number": "269"}, "amount": 0},
            ],
        }
    )

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        self.search_calls.append(query)
        return self.search_payload

    async def get_food(
        self, fdc_id: int, nutrient_numbers: Sequence[str] = ()
    ) -> dict[str, object]:
        self.food_calls.append(fdc_id)
        self.nutrient_requests.append(tuple(nutrient_numbers))
        return self.food_payload


@dataclass
class FakeNutritionCalculator(NutritionCalculator):
    """Returns fixed nutrition facts and records the ingredients it saw."""

    result: NutritionalInfo = field(
        default_factory=lambda: NutritionalInfo(
            calories=450, protein=25, carbs=40, fats=12, fiber=5, sugar=6
        )
    )
    calls: list[list[Ingredient]] = field(default_factory=list)

    async def calculate(self, ingredients: list[Ingredient]) -> NutritionalInfo:
        self.calls.append(list(ingredients))
        return self.result


@dataclass
class FailingNutritionCalculator(NutritionCalculator):
    """Always fails, like an unreachable nutrition source."""

    async def calculate(self, ingredients: list[Ingredient]) -> NutritionalInfo:
        raise RuntimeError("nutrition source unavailable")


def recipe_payload(**overrides: object) -> dict[str, object]:
    """Return a valid recipe payload with optional overrides."""
    payload: dict[str, object] = {
        "name": "Vegetable Curry",
        "description": "Mild curry for lunch service",
        "ingredients": [
            {"name": "Rice", "quantity": 400, "unit": "g"},
            {"name": "Chickpeas", "quantity": 200, "unit": "g"},
            {"name": "Coconut milk", "quantity": 250, "unit": "ml"},
        ],
        "instructions": "Simmer the chickpeas in coconut milk and serve over rice.",
        "serving_size": 4,
        "dietary_flags": {"vegetarian": True, "vegan": True, "halal": True},
        "allergens": [],
        "seasonal": ["all-year"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def nutrition_calculator() -> FakeNutritionCalculator:
    return FakeNutritionCalculator()


@pytest.fixture
def recipe_service(
    recipe_repository: InMemoryRecipeRepository,
    nutrition_calculator: FakeNutritionCalculator,
) -> RecipeService:
    return RecipeService(
        repository=recipe_repository,
        create_use_case=CreateRecipeUseCase(
            repository=recipe_repository,
            nutrition_calculator=nutrition_calculator,
        ),
    )


@pytest.fixture
def inventory_service() -> InventoryItemService:
    return InventoryItemService(InMemoryInventoryRepository())


@pytest.fixture
def meal_session_service() -> MealSessionService:
    return MealSessionService(InMemoryMealSessionRepository())


@pytest.fixture
def student_repository() -> InMemoryStudentRepository:
    return InMemoryStudentRepository()


@pytest.fixture
def container(
    settings: Settings,
    recipe_service: RecipeService,
    inventory_service: InventoryItemService,
    meal_session_service: MealSessionService,
    student_repository: InMemoryStudentRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        recipe_service=recipe_service,
        inventory_service=inventory_service,
        meal_session_service=meal_session_service,
        meal_attendance_service=MealAttendanceService(
            repository=InMemoryMealAttendanceRepository(),
            session_service=meal_session_service,
        ),
        student_service=StudentService(student_repository),
        close_resources=close_resources,
    )
