"""Recipe API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from school_meals.api.schemas import RecipeIn, ServingSizeIn
from school_meals.api.serializers import recipe_page_to_json, recipe_to_json
from school_meals.domain.errors import ValidationError

if TYPE_CHECKING:
    from school_meals.containers import AppContainer

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

_PAGING_PARAMS = {"page", "limit"}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _flag_filters(request: Request) -> dict[str, bool]:
    """Read dietary flag filters from every non-paging query parameter."""
    return {
        key: value.strip().lower() == "true"
        for key, value in request.query_params.items()
        if key not in _PAGING_PARAMS
    }


def _int_param(request: Request, name: str) -> int | None:
    raw = request.query_params.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer") from exc


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(body: RecipeIn, request: Request) -> dict[str, object]:
    """Create a recipe, enriching it with nutrition when available."""
    container = _container(request)
    recipe = await container.recipe_service.create_recipe(
        body.model_dump(exclude_unset=True)
    )
    return {
        "success": True,
        "message": "Recipe created successfully",
        "data": recipe_to_json(recipe, container.settings.nutrition_json_version),
    }


@router.get("")
async def list_recipes(request: Request) -> dict[str, object]:
    """Return one page of active recipes filtered by dietary flags."""
    container = _container(request)
    page_number = _int_param(request, "page")
    page = container.recipe_service.list_recipes(
        filters=_flag_filters(request),
        page=1 if page_number is None else page_number,
        limit=_int_param(request, "limit"),
    )
    return {
        "success": True,
        "count": len(page.items),
        "data": recipe_page_to_json(page, container.settings.nutrition_json_version),
    }


@router.get("/search")
async def search_recipes(request: Request, ingredient: str = "") -> dict[str, object]:
    """Return active recipes containing an ingredient."""
    container = _container(request)
    if not ingredient.strip():
        raise ValidationError("ingredient query parameter is required")
    recipes = container.recipe_service.search_by_ingredient(ingredient)
    version = container.settings.nutrition_json_version
    return {
        "success": True,
        "count": len(recipes),
        "data": [recipe_to_json(recipe, version) for recipe in recipes],
    }


@router.get("/dietary")
async def recipes_by_dietary_flags(request: Request) -> dict[str, object]:
    """Return every active recipe that has all requested flags."""
    container = _container(request)
    recipes = container.recipe_service.find_by_dietary_flags(_flag_filters(request))
    version = container.settings.nutrition_json_version
    return {
        "success": True,
        "count": len(recipes),
        "data": [recipe_to_json(recipe, version) for recipe in recipes],
    }


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: str, request: Request) -> dict[str, object]:
    container = _container(request)
    recipe = container.recipe_service.get_recipe(recipe_id)
    return {
        "success": True,
        "data": recipe_to_json(recipe, container.settings.nutrition_json_version),
    }


@router.put("/{recipe_id}")
async def update_recipe(
    recipe_id: str, body: RecipeIn, request: Request
) -> dict[str, object]:
    container = _container(request)
    recipe = container.recipe_service.update_recipe(
        recipe_id, body.model_dump(exclude_unset=True)
    )
    return {
        "success": True,
        "message": "Recipe updated successfully",
        "data": recipe_to_json(recipe, container.settings.nutrition_json_version),
    }


@router.delete("/{recipe_id}")
async def delete_recipe(recipe_id: str, request: Request) -> dict[str, object]:
    container = _container(request)
    recipe = container.recipe_service.delete_recipe(recipe_id)
    return {
        "success": True,
        "message": "Recipe deleted successfully",
        "data": recipe_to_json(recipe, container.settings.nutrition_json_version),
    }


@router.post("/{recipe_id}/serving-size")
async def adjust_serving_size(
    recipe_id: str, body: ServingSizeIn, request: Request
) -> dict[str, object]:
    """Rescale a recipe's ingredient quantities to a new serving size."""
    container = _container(request)
    recipe = container.recipe_service.adjust_serving_size(recipe_id, body.serving_size)
    return {
        "success": True,
        "data": recipe_to_json(recipe, container.settings.nutrition_json_version),
    }
