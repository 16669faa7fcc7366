"""Recipe nutrition calculation backed by USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from school_meals.adapters.fdc_client import FdcClient
from school_meals.domain.nutrition import FoodSummary, NutritionalInfo
from school_meals.domain.recipe import Ingredient
from school_meals.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

# FDC nutrient ids and numbers, all reported per 100 g.
_NUTRIENTS = {
    "calories": (1008, "208"),
    "protein": (1003, "203"),
    "fats": (1004, "204"),
    "carbs": (1005, "205"),
    "fiber": (1079, "291"),
    "sugar": (2000, "269"),
}
_NUTRIENT_NUMBERS = tuple(number for _, number in _NUTRIENTS.values())

# Volumes assume the density of water.
GRAMS_PER_UNIT = {
    "g": 1.0,
    "kg": 1000.0,
    "ml": 1.0,
    "l": 1000.0,
    "oz": 28.35,
    "lb": 453.59,
    "cup": 240.0,
    "tbsp": 15.0,
    "tsp": 5.0,
}

_logger = logging.getLogger(__name__)


class NutritionCalculator(Protocol):
    """Computes nutrition facts for a list of ingredients."""

    async def calculate(self, ingredients: list[Ingredient]) -> NutritionalInfo:
        """Return total nutrition facts for the ingredients."""


def ingredient_grams(ingredient: Ingredient) -> float | None:
    """Return the gram equivalent of an ingredient, or None for count units."""
    per_unit = GRAMS_PER_UNIT.get(ingredient.unit)
    if per_unit is None:
        return None
    return ingredient.quantity * per_unit


@dataclass
class FdcNutritionCalculator(NutritionCalculator):
    """Sums FDC per-100g nutrient values over recipe ingredients."""

    fdc_client: FdcClient
    cache: Cache
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def calculate(self, ingredients: list[Ingredient]) -> NutritionalInfo:
        total = NutritionalInfo()
        for ingredient in ingredients:
            grams = ingredient_grams(ingredient)
            if grams is None:
                _logger.info(
                    "Skipping ingredient without a mass unit: %s (%s)",
                    ingredient.name,
                    ingredient.unit,
                )
                continue
            per_100g = await self.per_100g(ingredient.name)
            if per_100g is None:
                _logger.info("No FDC match for ingredient: %s", ingredient.name)
                continue
            total = total + per_100g.scaled(grams / 100)
        return NutritionalInfo(
            calories=round(total.calories, 1),
            protein=round(total.protein, 1),
            carbs=round(total.carbs, 1),
            fats=round(total.fats, 1),
            fiber=round(total.fiber, 1),
            sugar=round(total.sugar, 1),
        )

    async def search(self, query: str, limit: int = 1) -> list[FoodSummary]:
        """Search FDC for generic foods matching the query."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action=f"search:{query}",
        )
        return [
            FoodSummary(
                fdc_id=food["fdcId"],
                description=food.get("description", ""),
                data_type=food.get("dataType"),
            )
            for food in payload.get("foods", [])
        ]

    async def per_100g(self, ingredient_name: str) -> NutritionalInfo | None:
        """Return per-100g nutrition for the best FDC match of a name."""
        cache_key = f"fdc:per100g:{ingredient_name.strip().lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionalInfo):
            return cached

        matches = await self.search(ingredient_name, limit=1)
        if not matches:
            return None
        fdc_id = matches[0].fdc_id
        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id, _NUTRIENT_NUMBERS),
            action=f"get_food:{fdc_id}",
        )
        nutrition = _extract_nutrition(payload.get("foodNutrients", []))
        self.cache.set(cache_key, nutrition, ttl_seconds=self.food_ttl_seconds)
        return nutrition

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _extract_nutrition(food_nutrients: list[dict[str, object]]) -> NutritionalInfo:
    """Map FDC nutrient entries onto nutrition facts."""
    values = dict.fromkeys(_NUTRIENTS, 0.0)
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        number = nutrient_info.get("number") or nutrient.get("nutrientNumber")
        amount = nutrient.get("amount", nutrient.get("value"))
        if amount is None:
            continue
        for field_name, (expected_id, expected_number) in _NUTRIENTS.items():
            if nutrient_id == expected_id or str(number) == expected_number:
                values[field_name] = float(amount)
    return NutritionalInfo(**values)
