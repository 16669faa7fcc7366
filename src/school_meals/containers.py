"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from school_meals.adapters.fdc_client import HttpxFdcClient
from school_meals.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from school_meals.adapters.supabase_meal_repository import (
    SupabaseMealAttendanceRepository,
    SupabaseMealSessionRepository,
)
from school_meals.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from school_meals.adapters.supabase_student_repository import (
    SupabaseStudentRepository,
)
from school_meals.config import Settings
from school_meals.services.cache import InMemoryCache
from school_meals.services.inventory import InventoryItemService
from school_meals.services.meals import MealAttendanceService, MealSessionService
from school_meals.services.nutrition import FdcNutritionCalculator
from school_meals.services.recipes import CreateRecipeUseCase, RecipeService
from school_meals.services.students import StudentService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recipe_service: RecipeService
    inventory_service: InventoryItemService
    meal_session_service: MealSessionService
    meal_attendance_service: MealAttendanceService
    student_service: StudentService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    inventory_repository = SupabaseInventoryRepository(supabase_client)
    meal_session_repository = SupabaseMealSessionRepository(supabase_client)
    meal_attendance_repository = SupabaseMealAttendanceRepository(supabase_client)
    student_repository = SupabaseStudentRepository(supabase_client)

    fdc_client = None
    nutrition_calculator = None
    if resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        nutrition_calculator = FdcNutritionCalculator(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
        )

    recipe_service = RecipeService(
        repository=recipe_repository,
        create_use_case=CreateRecipeUseCase(
            repository=recipe_repository,
            nutrition_calculator=nutrition_calculator,
        ),
        default_page_size=resolved_settings.default_page_size,
        max_page_size=resolved_settings.max_page_size,
    )
    meal_session_service = MealSessionService(meal_session_repository)
    meal_attendance_service = MealAttendanceService(
        repository=meal_attendance_repository,
        session_service=meal_session_service,
    )

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        recipe_service=recipe_service,
        inventory_service=InventoryItemService(inventory_repository),
        meal_session_service=meal_session_service,
        meal_attendance_service=meal_attendance_service,
        student_service=StudentService(student_repository),
        close_resources=close_resources,
    )
