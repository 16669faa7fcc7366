"""Supabase implementation for inventory items."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from school_meals.adapters.supabase_rows import (
    like_pattern,
    parse_datetime,
    parse_record_id,
    store_errors,
    to_row,
)
from school_meals.domain.errors import PersistenceError
from school_meals.domain.inventory import (
    DEFAULT_REORDER_LEVEL,
    DEFAULT_UNIT,
    InventoryCategory,
    InventoryItem,
    InventoryStatus,
)
from school_meals.services.inventory import InventoryRepository

_TABLE = "inventory_items"


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase-backed repository for inventory items."""

    client: Client

    def create(self, payload: dict[str, object]) -> InventoryItem:
        with store_errors("create inventory item"):
            response = self.client.table(_TABLE).insert(to_row(payload)).execute()
        if not response.data:
            raise PersistenceError("Failed to create inventory item: no row returned")
        return _parse_item(response.data[0])

    def find_by_id(self, item_id: str) -> InventoryItem | None:
        record_id = parse_record_id(item_id)
        if record_id is None:
            return None
        with store_errors("find inventory item"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def find_many(
        self,
        category: str | None = None,
        status: str | None = None,
        name_contains: str | None = None,
    ) -> list[InventoryItem]:
        query = self.client.table(_TABLE).select("*")
        if category:
            query = query.eq("category", str(category))
        if status:
            query = query.eq("status", str(status))
        if name_contains:
            query = query.ilike("name", like_pattern(name_contains))
        with store_errors("list inventory items"):
            response = query.order("created_at", desc=True).execute()
        return [_parse_item(row) for row in response.data or []]

    def update(self, item_id: str, payload: dict[str, object]) -> InventoryItem | None:
        record_id = parse_record_id(item_id)
        if record_id is None:
            return None
        row = {**to_row(payload), "updated_at": datetime.now(tz=UTC).isoformat()}
        with store_errors("update inventory item"):
            response = (
                self.client.table(_TABLE).update(row).eq("id", record_id).execute()
            )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete(self, item_id: str) -> InventoryItem | None:
        record_id = parse_record_id(item_id)
        if record_id is None:
            return None
        with store_errors("delete inventory item"):
            response = self.client.table(_TABLE).delete().eq("id", record_id).execute()
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def count(self, status: str | None = None) -> int:
        query = self.client.table(_TABLE).select("id", count="exact")
        if status:
            query = query.eq("status", str(status))
        with store_errors("count inventory items"):
            response = query.limit(1).execute()
        return int(response.count or 0)

    def find_low_stock(self) -> list[InventoryItem]:
        # PostgREST filters cannot compare two columns, so the filter runs here.
        with store_errors("list low stock items"):
            response = self.client.table(_TABLE).select("*").execute()
        items = [_parse_item(row) for row in response.data or []]
        low = [item for item in items if item.quantity <= item.reorder_level]
        return sorted(low, key=lambda item: item.quantity)

    def find_by_category(self, category: str) -> list[InventoryItem]:
        with store_errors("list inventory items by category"):
            response = (
                self.client.table(_TABLE)
                .select("*")
                .eq("category", str(category))
                .order("name")
                .execute()
            )
        return [_parse_item(row) for row in response.data or []]


def _parse_item(row: dict[str, object]) -> InventoryItem:
    """Parse an inventory row into a domain model."""
    reorder_level = row.get("reorder_level")
    return InventoryItem(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        description=str(row.get("description") or ""),
        category=InventoryCategory(row.get("category") or InventoryCategory.OTHER),
        quantity=float(row.get("quantity") or 0),
        unit=str(row.get("unit") or DEFAULT_UNIT),
        reorder_level=float(
            DEFAULT_REORDER_LEVEL if reorder_level is None else reorder_level
        ),
        unit_price=float(row.get("unit_price") or 0),
        supplier=str(row.get("supplier") or ""),
        location=str(row.get("location") or ""),
        expiry_date=parse_datetime(row.get("expiry_date")),
        status=InventoryStatus(row.get("status") or InventoryStatus.ACTIVE),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
