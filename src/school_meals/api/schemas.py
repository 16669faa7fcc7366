"""Pydantic models for API request bodies."""

import datetime as dt
from typing import Annotated

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from school_meals.domain.inventory import MEASUREMENT_UNITS, InventoryCategory
from school_meals.domain.meals import MEAL_TYPES, AttendanceStatus, MealSessionStatus
from school_meals.domain.recipe import ALLERGENS, INGREDIENT_UNITS, SEASONS


def _one_of(vocabulary: tuple[str, ...]) -> AfterValidator:
    def check(value: str) -> str:
        if value not in vocabulary:
            raise ValueError(f"must be one of: {', '.join(vocabulary)}")
        return value

    return AfterValidator(check)


IngredientUnit = Annotated[str, _one_of(INGREDIENT_UNITS)]
Allergen = Annotated[str, _one_of(ALLERGENS)]
Season = Annotated[str, _one_of(SEASONS)]
MeasurementUnit = Annotated[str, _one_of(MEASUREMENT_UNITS)]
MealType = Annotated[str, _one_of(MEAL_TYPES)]


class ApiModel(BaseModel):
    """Base model accepting camelCase keys or field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IngredientIn(ApiModel):
    """Recipe ingredient payload."""

    name: str
    quantity: float = Field(ge=0)
    unit: IngredientUnit
    is_essential: bool = True


class NutritionalInfoIn(ApiModel):
    """Nutrition facts payload; negative values are rejected by the domain."""

    calories: float = Field(
        default=0, validation_alias=AliasChoices("calories", "callories")
    )
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    fiber: float = 0
    sugar: float = 0


class DietaryFlagsIn(ApiModel):
    """Dietary flags payload."""

    vegetarian: bool = False
    vegan: bool = False
    halal: bool = False
    gluten_free: bool = False
    dairy_free: bool = False
    nut_free: bool = False


class RecipeIn(ApiModel):
    """Recipe payload for create and update.

    Required fields default to empty values so the recipe's own validation
    reports what is missing.
    """

    name: str = ""
    description: str = ""
    ingredients: list[IngredientIn] = Field(default_factory=list)
    instructions: str = ""
    serving_size: int = 0
    nutritional_info: NutritionalInfoIn | None = None
    dietary_flags: DietaryFlagsIn | None = None
    allergens: list[Allergen] = Field(default_factory=list)
    prep_time: int | None = Field(default=None, ge=0)
    seasonal: list[Season] = Field(default_factory=list)


class ServingSizeIn(ApiModel):
    """New serving size for a recipe."""

    serving_size: int


class InventoryItemIn(ApiModel):
    """Inventory item payload for create and full update."""

    name: str = Field(min_length=1)
    description: str = ""
    category: InventoryCategory
    quantity: float = Field(ge=0)
    unit: MeasurementUnit
    reorder_level: float | None = Field(default=None, ge=0)
    unit_price: float = Field(default=0, ge=0)
    supplier: str = ""
    location: str = ""
    expiry_date: dt.datetime | None = None


class InventoryItemPatch(ApiModel):
    """Partial inventory item payload."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: InventoryCategory | None = None
    quantity: float | None = Field(default=None, ge=0)
    unit: MeasurementUnit | None = None
    reorder_level: float | None = Field(default=None, ge=0)
    unit_price: float | None = Field(default=None, ge=0)
    supplier: str | None = None
    location: str | None = None
    expiry_date: dt.datetime | None = None


class MealSessionIn(ApiModel):
    """Meal session payload."""

    date: dt.date | None = None
    meal_type: MealType | None = None
    school_id: str | None = None
    grade: str | None = None
    class_name: str | None = None
    planned_headcount: int | None = Field(default=None, ge=0)
    wastage_count: int | None = Field(default=None, ge=0)
    status: MealSessionStatus | None = None
    menu_id: str | None = None


class MealAttendanceIn(ApiModel):
    """Attendance payload."""

    student_id: str | None = None
    meal_session_id: str | None = None
    status: AttendanceStatus | None = None
    served_at: dt.datetime | None = None
    notes: str | None = None
