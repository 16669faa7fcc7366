"""Tests for the recipe entity."""

import pytest

from school_meals.domain.dietary import DietaryFlags
from school_meals.domain.errors import InvalidArgumentError, ValidationError
from school_meals.domain.nutrition import NutritionalInfo
from school_meals.domain.recipe import Ingredient, Recipe


def _recipe(**overrides: object) -> Recipe:
    fields: dict[str, object] = {
        "name": "Chicken Rice",
        "ingredients": [
            Ingredient(name="Chicken", quantity=100, unit="g"),
            Ingredient(name="Rice", quantity=250, unit="g", is_essential=False),
        ],
        "instructions": "Cook the rice, grill the chicken.",
        "serving_size": 4,
    }
    fields.update(overrides)
    return Recipe(**fields)


def test_valid_recipe_passes_validation() -> None:
    assert _recipe().validate() is True


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": "  "}, "Recipe name is required"),
        ({"ingredients": []}, "Recipe must have at least one ingredient"),
        ({"instructions": ""}, "Instructions are required"),
        ({"serving_size": 0}, "Serving size must be greater than 0"),
        (
            {"ingredients": [Ingredient(name="Rice", quantity=1, unit="bag")]},
            "Unknown ingredient unit: bag",
        ),
        ({"allergens": ["celery"]}, "Unknown allergen: celery"),
        ({"seasonal": ["monsoon"]}, "Unknown season: monsoon"),
    ],
)
def test_validate_reports_first_failure(
    overrides: dict[str, object], message: str
) -> None:
    with pytest.raises(ValidationError, match=message):
        _recipe(**overrides).validate()


def test_empty_ingredients_fail_even_when_everything_else_is_valid() -> None:
    recipe = _recipe(ingredients=[])

    with pytest.raises(ValidationError, match="at least one ingredient"):
        recipe.validate()


def test_validation_order_reports_name_before_ingredients() -> None:
    with pytest.raises(ValidationError, match="Recipe name is required"):
        _recipe(name="", ingredients=[]).validate()


def test_adjust_serving_size_scales_quantities() -> None:
    recipe = _recipe()

    recipe.adjust_serving_size(8)

    assert recipe.serving_size == 8
    assert [ingredient.quantity for ingredient in recipe.ingredients] == [200, 500]
    assert recipe.ingredients[1].is_essential is False


@pytest.mark.parametrize("new_size", [0, -2])
def test_adjust_serving_size_rejects_non_positive(new_size: int) -> None:
    recipe = _recipe()

    with pytest.raises(InvalidArgumentError):
        recipe.adjust_serving_size(new_size)

    assert recipe.serving_size == 4
    assert recipe.ingredients[0].quantity == 100


def test_adjust_serving_size_requires_positive_current_size() -> None:
    recipe = _recipe(serving_size=0)

    with pytest.raises(InvalidArgumentError):
        recipe.adjust_serving_size(4)


def test_mark_as_inactive_is_idempotent() -> None:
    recipe = _recipe()

    recipe.mark_as_inactive()
    first_update = recipe.updated_at
    recipe.mark_as_inactive()

    assert recipe.is_active is False
    assert recipe.updated_at >= first_update


def test_update_nutrition_replaces_facts() -> None:
    recipe = _recipe()
    nutrition = NutritionalInfo(calories=400, protein=30)

    recipe.update_nutrition(nutrition)

    assert recipe.nutritional_info == nutrition


def test_dietary_and_allergen_queries() -> None:
    recipe = _recipe(
        dietary_flags=DietaryFlags(vegetarian=True, halal=True),
        allergens=["dairy", "eggs"],
    )

    assert recipe.is_vegetarian()
    assert recipe.is_halal()
    assert recipe.has_allergen("eggs")
    assert not recipe.has_allergen("nuts")
    assert not _recipe().is_halal()


def test_ingredient_mapping_accepts_camel_case() -> None:
    ingredient = Ingredient.from_mapping(
        {"name": "Milk", "quantity": "250", "unit": "ml", "isEssential": False}
    )

    assert ingredient == Ingredient(
        name="Milk", quantity=250, unit="ml", is_essential=False
    )
    assert ingredient.to_json()["isEssential"] is False
