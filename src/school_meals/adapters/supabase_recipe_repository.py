"""Supabase implementation for recipe persistence."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from postgrest.exceptions import APIError
from supabase import Client

from school_meals.adapters.supabase_rows import (
    like_pattern,
    parse_datetime,
    parse_record_id,
    store_errors,
)
from school_meals.domain.dietary import DIETARY_FLAGS, DietaryFlags, required_flags
from school_meals.domain.errors import PersistenceError
from school_meals.domain.nutrition import NutritionalInfo
from school_meals.domain.pagination import Page, Pagination
from school_meals.domain.recipe import Ingredient, Recipe
from school_meals.services.recipes import RecipeRepository

if TYPE_CHECKING:
    from postgrest import SyncSelectRequestBuilder

_TABLE = "recipes"
_RANGE_NOT_SATISFIABLE = "PGRST103"

# Flags are stored as a camelCase JSON object; filters read its text values.
_DIETARY_FLAG_COLUMNS = {
    attribute: f"dietary_flags->>{json_key}" for attribute, json_key, _ in DIETARY_FLAGS
}


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed recipe repository with soft deletes."""

    client: Client

    def save(self, recipe: Recipe) -> Recipe:
        with store_errors("save recipe"):
            response = self.client.table(_TABLE).insert(recipe_to_row(recipe)).execute()
        if not response.data:
            raise PersistenceError("Failed to save recipe: no row returned")
        return parse_recipe(response.data[0])

    def find_by_id(self, recipe_id: str) -> Recipe | None:
        record_id = parse_record_id(recipe_id)
        if record_id is None:
            return None
        with store_errors("find recipe"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return parse_recipe(response.data[0])

    def find_all(
        self, filters: Mapping[str, object] | None, pagination: Pagination
    ) -> Page[Recipe]:
        query = self._active_with_flags("*", filters)
        with store_errors("find recipes"):
            try:
                response = (
                    query.order("created_at", desc=True)
                    .range(pagination.skip, pagination.skip + pagination.limit - 1)
                    .execute()
                )
            except APIError as exc:
                # PostgREST rejects an offset past the last row.
                if exc.code != _RANGE_NOT_SATISFIABLE:
                    raise
                return Page.build([], self._count_active(filters), pagination)
        recipes = [parse_recipe(row) for row in response.data or []]
        return Page.build(recipes, response.count or 0, pagination)

    def _active_with_flags(
        self, columns: str, filters: Mapping[str, object] | None
    ) -> SyncSelectRequestBuilder:
        query = (
            self.client.table(_TABLE)
            .select(columns, count="exact")
            .eq("is_active", True)
        )
        for attribute in required_flags(filters):
            query = query.eq(_DIETARY_FLAG_COLUMNS[attribute], "true")
        return query

    def _count_active(self, filters: Mapping[str, object] | None) -> int:
        with store_errors("count recipes"):
            response = self._active_with_flags("id", filters).limit(1).execute()
        return response.count or 0

    def update(self, recipe_id: str, changes: dict[str, object]) -> Recipe | None:
        record_id = parse_record_id(recipe_id)
        if record_id is None:
            return None
        payload = {
            **recipe_changes_to_row(changes),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        with store_errors("update recipe"):
            response = (
                self.client.table(_TABLE).update(payload).eq("id", record_id).execute()
            )
        if not response.data:
            return None
        return parse_recipe(response.data[0])

    def delete(self, recipe_id: str) -> Recipe | None:
        record_id = parse_record_id(recipe_id)
        if record_id is None:
            return None
        payload = {"is_active": False, "updated_at": datetime.now(tz=UTC).isoformat()}
        with store_errors("delete recipe"):
            response = (
                self.client.table(_TABLE).update(payload).eq("id", record_id).execute()
            )
        if not response.data:
            return None
        return parse_recipe(response.data[0])

    def search_by_ingredient(self, text: str) -> list[Recipe]:
        with store_errors("search recipes by ingredient"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("is_active", True)
                .ilike("ingredient_names", like_pattern(text))
                .execute()
            )
        return [parse_recipe(row) for row in response.data or []]

    def find_by_dietary_flags(self, flags: Mapping[str, object]) -> list[Recipe]:
        query = self.client.table(_TABLE).select("*").eq("is_active", True)
        for attribute in required_flags(flags):
            query = query.eq(_DIETARY_FLAG_COLUMNS[attribute], "true")
        with store_errors("find recipes by dietary flags"):
            response = query.execute()
        return [parse_recipe(row) for row in response.data or []]


def recipe_to_row(recipe: Recipe) -> dict[str, object]:
    """Map a new recipe onto a row; id and timestamps come from the database."""
    return {
        **recipe_changes_to_row(
            {
                "name": recipe.name,
                "description": recipe.description,
                "instructions": recipe.instructions,
                "ingredients": recipe.ingredients,
                "allergens": recipe.allergens,
                "serving_size": recipe.serving_size,
                "prep_time": recipe.prep_time,
                "seasonal": recipe.seasonal,
                "dietary_flags": recipe.dietary_flags,
                "nutritional_info": recipe.nutritional_info,
            }
        ),
        "is_active": recipe.is_active,
    }


def recipe_changes_to_row(changes: Mapping[str, object]) -> dict[str, object]:
    """Map typed recipe field values onto row columns."""
    row: dict[str, object] = {}
    for key, value in changes.items():
        if key == "ingredients":
            row["ingredients"] = [ingredient.to_json() for ingredient in value]
            row["ingredient_names"] = "\n".join(
                ingredient.name.lower() for ingredient in value
            )
        elif key == "dietary_flags":
            row["dietary_flags"] = value.to_json()
        elif key == "nutritional_info":
            row["nutritional_info"] = value.to_row() if value is not None else None
        elif key in {"allergens", "seasonal"}:
            row[key] = list(value)
        else:
            row[key] = value
    return row


def parse_recipe(row: Mapping[str, object]) -> Recipe:
    """Parse a recipe row into a domain entity."""
    nutrition_raw = row.get("nutritional_info")
    created_at = parse_datetime(row.get("created_at"))
    updated_at = parse_datetime(row.get("updated_at"))
    recipe = Recipe(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        description=str(row.get("description") or ""),
        instructions=str(row.get("instructions") or ""),
        ingredients=[
            Ingredient.from_mapping(item) for item in row.get("ingredients") or []
        ],
        allergens=list(row.get("allergens") or []),
        serving_size=int(row.get("serving_size") or 0),
        prep_time=int(row.get("prep_time") or 0),
        seasonal=list(row.get("seasonal") or []),
        is_active=bool(row.get("is_active", True)),
        nutritional_info=(
            NutritionalInfo.from_mapping(nutrition_raw) if nutrition_raw else None
        ),
        dietary_flags=DietaryFlags.from_mapping(row.get("dietary_flags")),
    )
    if created_at is not None:
        recipe.created_at = created_at
    if updated_at is not None:
        recipe.updated_at = updated_at
    return recipe
