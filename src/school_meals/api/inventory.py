"""Inventory API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request, status

from school_meals.api.schemas import InventoryItemIn, InventoryItemPatch
from school_meals.api.serializers import inventory_item_to_json, inventory_stats_to_json
from school_meals.domain.inventory import InventoryCategory, InventoryStatus

if TYPE_CHECKING:
    from school_meals.containers import AppContainer

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("")
async def list_items(
    request: Request,
    category: InventoryCategory | None = None,
    item_status: InventoryStatus | None = Query(default=None, alias="status"),
    search: str | None = None,
) -> dict[str, object]:
    """List inventory items with optional filters."""
    items = _container(request).inventory_service.list_items(
        category=category, status=item_status, search=search
    )
    return {
        "success": True,
        "count": len(items),
        "data": [inventory_item_to_json(item) for item in items],
    }


@router.get("/stats")
async def inventory_stats(request: Request) -> dict[str, object]:
    stats = _container(request).inventory_service.get_stats()
    return {"success": True, "data": inventory_stats_to_json(stats)}


@router.get("/low-stock")
async def low_stock_items(request: Request) -> dict[str, object]:
    """Items at or below their reorder level, lowest quantity first."""
    items = _container(request).inventory_service.list_low_stock()
    return {
        "success": True,
        "count": len(items),
        "data": [inventory_item_to_json(item) for item in items],
    }


@router.get("/category/{category}")
async def items_by_category(
    category: InventoryCategory, request: Request
) -> dict[str, object]:
    items = _container(request).inventory_service.list_by_category(category)
    return {
        "success": True,
        "count": len(items),
        "data": [inventory_item_to_json(item) for item in items],
    }


@router.get("/{item_id}")
async def get_item(item_id: str, request: Request) -> dict[str, object]:
    item = _container(request).inventory_service.get_item(item_id)
    return {"success": True, "data": inventory_item_to_json(item)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(body: InventoryItemIn, request: Request) -> dict[str, object]:
    item = _container(request).inventory_service.create_item(body.model_dump())
    return {
        "success": True,
        "message": "Inventory item created successfully",
        "data": inventory_item_to_json(item),
    }


@router.put("/{item_id}")
async def update_item(
    item_id: str, body: InventoryItemIn, request: Request
) -> dict[str, object]:
    """Fully replace an inventory item."""
    item = _container(request).inventory_service.update_item(
        item_id, body.model_dump()
    )
    return {
        "success": True,
        "message": "Inventory item updated successfully",
        "data": inventory_item_to_json(item),
    }


@router.patch("/{item_id}")
async def patch_item(
    item_id: str, body: InventoryItemPatch, request: Request
) -> dict[str, object]:
    """Partially update an inventory item; only sent fields change."""
    item = _container(request).inventory_service.patch_item(
        item_id, body.model_dump(exclude_unset=True)
    )
    return {
        "success": True,
        "message": "Inventory item partially updated successfully",
        "data": inventory_item_to_json(item),
    }


@router.delete("/{item_id}")
async def delete_item(item_id: str, request: Request) -> dict[str, object]:
    item = _container(request).inventory_service.delete_item(item_id)
    return {
        "success": True,
        "message": "Inventory item deleted successfully",
        "data": inventory_item_to_json(item),
    }
