"""Inventory domain models and status derivation."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

DEFAULT_REORDER_LEVEL = 10
DEFAULT_UNIT = "pieces"
MEASUREMENT_UNITS = ("pieces", "kg", "g", "liters", "ml", "boxes", "packs", "units")


class InventoryCategory(StrEnum):
    FOOD = "FOOD"
    SUPPLIES = "SUPPLIES"
    EQUIPMENT = "EQUIPMENT"
    OTHER = "OTHER"


class InventoryStatus(StrEnum):
    ACTIVE = "ACTIVE"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class InventoryItem:
    """A stocked item in the school kitchen."""

    id: str
    name: str
    description: str
    category: InventoryCategory
    quantity: float
    unit: str
    reorder_level: float
    unit_price: float
    supplier: str
    location: str
    expiry_date: datetime | None
    status: InventoryStatus
    created_at: datetime | None
    updated_at: datetime | None


def calculate_inventory_status(
    quantity: float,
    reorder_level: float,
    expiry_date: datetime | None,
    now: datetime | None = None,
) -> InventoryStatus:
    """Derive the stock status.

    Expiry takes precedence over an empty stock, which takes precedence over
    a low stock. Naive expiry dates are treated as UTC.
    """
    current = now or datetime.now(tz=UTC)
    if expiry_date is not None:
        if expiry_date.tzinfo is None:
            expiry_date = expiry_date.replace(tzinfo=UTC)
        if expiry_date < current:
            return InventoryStatus.EXPIRED
    if quantity == 0:
        return InventoryStatus.OUT_OF_STOCK
    if quantity <= reorder_level:
        return InventoryStatus.LOW_STOCK
    return InventoryStatus.ACTIVE
