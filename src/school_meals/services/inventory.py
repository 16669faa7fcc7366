"""Inventory item business logic."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from school_meals.domain.errors import NotFoundError, ValidationError
from school_meals.domain.inventory import (
    DEFAULT_REORDER_LEVEL,
    DEFAULT_UNIT,
    InventoryCategory,
    InventoryItem,
    InventoryStatus,
    calculate_inventory_status,
)

# Defaults for fields omitted on create or full update.
_ITEM_DEFAULTS: dict[str, object] = {
    "description": "",
    "category": InventoryCategory.OTHER,
    "quantity": 0,
    "unit": DEFAULT_UNIT,
    "reorder_level": DEFAULT_REORDER_LEVEL,
    "unit_price": 0,
    "supplier": "",
    "location": "",
    "expiry_date": None,
}


class InventoryRepository(Protocol):
    """Persistence interface for inventory items."""

    def create(self, payload: dict[str, object]) -> InventoryItem:
        """Create an item and return it."""

    def find_by_id(self, item_id: str) -> InventoryItem | None:
        """Return an item by id, if present."""

    def find_many(
        self,
        category: str | None = None,
        status: str | None = None,
        name_contains: str | None = None,
    ) -> list[InventoryItem]:
        """Return items matching the filters, newest first."""

    def update(self, item_id: str, payload: dict[str, object]) -> InventoryItem | None:
        """Update an item and return it."""

    def delete(self, item_id: str) -> InventoryItem | None:
        """Remove an item and return what was removed."""

    def count(self, status: str | None = None) -> int:
        """Count items, optionally with a given status."""

    def find_low_stock(self) -> list[InventoryItem]:
        """Return items at or below their reorder level, lowest quantity first."""

    def find_by_category(self, category: str) -> list[InventoryItem]:
        """Return items in a category sorted by name."""


@dataclass(frozen=True)
class InventoryStats:
    """Item counts by status."""

    total: int
    active: int
    low_stock: int
    out_of_stock: int
    expired: int


@dataclass
class InventoryItemService:
    """Application service for inventory items."""

    repository: InventoryRepository

    def create_item(self, payload: Mapping[str, object]) -> InventoryItem:
        """Create an item with its initial status."""
        data = _with_defaults(payload)
        status = calculate_inventory_status(
            quantity=data["quantity"],
            reorder_level=data["reorder_level"],
            expiry_date=data["expiry_date"],
        )
        return self.repository.create({**data, "status": status})

    def get_item(self, item_id: str) -> InventoryItem:
        item = self.repository.find_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item with ID {item_id} not found")
        return item

    def list_items(
        self,
        category: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> list[InventoryItem]:
        return self.repository.find_many(
            category=category, status=status, name_contains=search or None
        )

    def update_item(self, item_id: str, payload: Mapping[str, object]) -> InventoryItem:
        """Replace an item; omitted optional fields revert to their defaults."""
        self.get_item(item_id)
        data = _with_defaults(payload)
        status = calculate_inventory_status(
            quantity=data["quantity"],
            reorder_level=data["reorder_level"],
            expiry_date=data["expiry_date"],
        )
        return self._update(item_id, {**data, "status": status})

    def patch_item(self, item_id: str, payload: Mapping[str, object]) -> InventoryItem:
        """Apply a partial update and recompute status from the merged view.

        Only expiry_date may be cleared with None; other None values are
        treated as omitted.
        """
        data = {
            key: value
            for key, value in payload.items()
            if value is not None or key == "expiry_date"
        }
        if not data:
            raise ValidationError("At least one field must be provided for update")
        existing = self.get_item(item_id)
        status = calculate_inventory_status(
            quantity=data.get("quantity", existing.quantity),
            reorder_level=data.get("reorder_level", existing.reorder_level),
            expiry_date=data.get("expiry_date", existing.expiry_date),
        )
        return self._update(item_id, {**data, "status": status})

    def delete_item(self, item_id: str) -> InventoryItem:
        self.get_item(item_id)
        deleted = self.repository.delete(item_id)
        if deleted is None:
            raise NotFoundError(f"Inventory item with ID {item_id} not found")
        return deleted

    def list_low_stock(self) -> list[InventoryItem]:
        return self.repository.find_low_stock()

    def list_by_category(self, category: str) -> list[InventoryItem]:
        return self.repository.find_by_category(category)

    def get_stats(self) -> InventoryStats:
        return InventoryStats(
            total=self.repository.count(),
            active=self.repository.count(InventoryStatus.ACTIVE),
            low_stock=self.repository.count(InventoryStatus.LOW_STOCK),
            out_of_stock=self.repository.count(InventoryStatus.OUT_OF_STOCK),
            expired=self.repository.count(InventoryStatus.EXPIRED),
        )

    def _update(self, item_id: str, payload: dict[str, object]) -> InventoryItem:
        updated = self.repository.update(item_id, payload)
        if updated is None:
            raise NotFoundError(f"Inventory item with ID {item_id} not found")
        return updated


def _with_defaults(payload: Mapping[str, object]) -> dict[str, object]:
    return {
        **_ITEM_DEFAULTS,
        **{key: value for key, value in payload.items() if value is not None},
    }
