"""Recipe use cases and application service."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Protocol

from school_meals.domain.dietary import DietaryFlags
from school_meals.domain.errors import NotFoundError
from school_meals.domain.nutrition import NutritionalInfo
from school_meals.domain.pagination import Page, Pagination
from school_meals.domain.recipe import DEFAULT_PREP_TIME_MINUTES, Ingredient, Recipe
from school_meals.services.nutrition import NutritionCalculator

_logger = logging.getLogger(__name__)

# Payload keys a recipe update may change.
_UPDATABLE_FIELDS = (
    "name",
    "description",
    "ingredients",
    "instructions",
    "nutritional_info",
    "dietary_flags",
    "allergens",
    "serving_size",
    "prep_time",
    "seasonal",
)


class RecipeRepository(Protocol):
    """Persistence interface for recipes.

    Identifiers that are not valid record ids behave as missing records.
    """

    def save(self, recipe: Recipe) -> Recipe:
        """Persist a new recipe and return it with id and timestamps."""

    def find_by_id(self, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, active or not."""

    def find_all(
        self, filters: Mapping[str, object] | None, pagination: Pagination
    ) -> Page[Recipe]:
        """Return one page of active recipes, newest first."""

    def update(self, recipe_id: str, changes: dict[str, object]) -> Recipe | None:
        """Apply recipe field changes and return the updated recipe."""

    def delete(self, recipe_id: str) -> Recipe | None:
        """Soft-delete a recipe and return it."""

    def search_by_ingredient(self, text: str) -> list[Recipe]:
        """Return active recipes with an ingredient name containing text."""

    def find_by_dietary_flags(self, flags: Mapping[str, object]) -> list[Recipe]:
        """Return active recipes that have every requested flag set."""


def recipe_changes(payload: Mapping[str, object]) -> dict[str, object]:
    """Convert a request payload into typed recipe field values."""
    changes: dict[str, object] = {}
    for key in _UPDATABLE_FIELDS:
        if key not in payload:
            continue
        value = payload[key]
        if key == "ingredients":
            value = [_as_ingredient(item) for item in value or []]
        elif key == "dietary_flags":
            value = _as_dietary_flags(value)
        elif key == "nutritional_info":
            value = _as_nutritional_info(value)
        elif key in {"allergens", "seasonal"}:
            value = list(value or [])
        elif key == "prep_time" and value is None:
            value = DEFAULT_PREP_TIME_MINUTES
        changes[key] = value
    return changes


def build_recipe(payload: Mapping[str, object]) -> Recipe:
    """Construct an unsaved recipe from a request payload."""
    fields = recipe_changes(payload)
    return Recipe(
        name=str(fields.get("name") or ""),
        description=str(fields.get("description") or ""),
        ingredients=fields.get("ingredients", []),
        instructions=str(fields.get("instructions") or ""),
        serving_size=int(fields.get("serving_size") or 0),
        nutritional_info=fields.get("nutritional_info"),
        dietary_flags=fields.get("dietary_flags", DietaryFlags()),
        allergens=fields.get("allergens", []),
        prep_time=fields.get("prep_time", DEFAULT_PREP_TIME_MINUTES),
        seasonal=fields.get("seasonal", []),
    )


@dataclass
class CreateRecipeUseCase:
    """Validates, optionally enriches with nutrition, and saves a recipe."""

    repository: RecipeRepository
    nutrition_calculator: NutritionCalculator | None = None

    async def execute(self, payload: Mapping[str, object]) -> Recipe:
        recipe = build_recipe(payload)
        recipe.validate()

        if self.nutrition_calculator is not None and recipe.ingredients:
            try:
                nutrition = await self.nutrition_calculator.calculate(
                    recipe.ingredients
                )
            except Exception as exc:
                _logger.warning(
                    "Nutrition calculation failed for recipe %r: %s", recipe.name, exc
                )
            else:
                recipe.update_nutrition(nutrition)

        return self.repository.save(recipe)


@dataclass
class RecipeService:
    """Application service for recipe operations."""

    repository: RecipeRepository
    create_use_case: CreateRecipeUseCase
    default_page_size: int = 10
    max_page_size: int = 100

    async def create_recipe(self, payload: Mapping[str, object]) -> Recipe:
        return await self.create_use_case.execute(payload)

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = self.repository.find_by_id(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe with ID '{recipe_id}' not found")
        return recipe

    def list_recipes(
        self,
        filters: Mapping[str, object] | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Recipe]:
        """Return a page of active recipes matching the dietary filters."""
        pagination = Pagination(
            page=page,
            limit=min(
                self.default_page_size if limit is None else limit, self.max_page_size
            ),
        )
        return self.repository.find_all(filters, pagination)

    def update_recipe(self, recipe_id: str, payload: Mapping[str, object]) -> Recipe:
        """Merge payload fields over the stored recipe, validate, and persist."""
        existing = self.get_recipe(recipe_id)
        changes = recipe_changes(payload)
        replace(existing, **changes).validate()
        updated = self.repository.update(recipe_id, changes)
        if updated is None:
            raise NotFoundError(f"Recipe with ID '{recipe_id}' not found")
        return updated

    def delete_recipe(self, recipe_id: str) -> Recipe:
        deleted = self.repository.delete(recipe_id)
        if deleted is None:
            raise NotFoundError(f"Recipe with ID '{recipe_id}' not found")
        return deleted

    def adjust_serving_size(self, recipe_id: str, new_serving_size: int) -> Recipe:
        """Rescale a stored recipe's ingredients to a new serving size."""
        recipe = self.get_recipe(recipe_id)
        recipe.adjust_serving_size(new_serving_size)
        updated = self.repository.update(
            recipe_id,
            {"ingredients": recipe.ingredients, "serving_size": recipe.serving_size},
        )
        if updated is None:
            raise NotFoundError(f"Recipe with ID '{recipe_id}' not found")
        return updated

    def search_by_ingredient(self, text: str) -> list[Recipe]:
        return self.repository.search_by_ingredient(text.strip())

    def find_by_dietary_flags(self, flags: Mapping[str, object]) -> list[Recipe]:
        return self.repository.find_by_dietary_flags(flags)


def _as_ingredient(item: object) -> Ingredient:
    if isinstance(item, Ingredient):
        return item
    return Ingredient.from_mapping(item)


def _as_dietary_flags(value: object) -> DietaryFlags:
    if isinstance(value, DietaryFlags):
        return value
    return DietaryFlags.from_mapping(value)


def _as_nutritional_info(value: object) -> NutritionalInfo | None:
    if value is None or isinstance(value, NutritionalInfo):
        return value
    return NutritionalInfo.from_mapping(value)
