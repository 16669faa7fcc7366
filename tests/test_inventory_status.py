"""Tests for inventory status derivation."""

from datetime import UTC, datetime, timedelta

from school_meals.domain.inventory import InventoryStatus, calculate_inventory_status

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def test_expired_beats_out_of_stock() -> None:
    status = calculate_inventory_status(
        quantity=0,
        reorder_level=10,
        expiry_date=NOW - timedelta(days=1),
        now=NOW,
    )

    assert status is InventoryStatus.EXPIRED


def test_low_stock_at_or_below_reorder_level() -> None:
    assert (
        calculate_inventory_status(5, 10, None, now=NOW) is InventoryStatus.LOW_STOCK
    )
    assert (
        calculate_inventory_status(10, 10, None, now=NOW) is InventoryStatus.LOW_STOCK
    )


def test_out_of_stock_when_empty() -> None:
    assert (
        calculate_inventory_status(0, 10, None, now=NOW)
        is InventoryStatus.OUT_OF_STOCK
    )


def test_active_above_reorder_level() -> None:
    assert calculate_inventory_status(20, 10, None, now=NOW) is InventoryStatus.ACTIVE


def test_future_expiry_does_not_expire() -> None:
    status = calculate_inventory_status(
        quantity=20, reorder_level=10, expiry_date=NOW + timedelta(days=3), now=NOW
    )

    assert status is InventoryStatus.ACTIVE


def test_naive_expiry_is_treated_as_utc() -> None:
    status = calculate_inventory_status(
        quantity=20,
        reorder_level=10,
        expiry_date=datetime(2025, 2, 28, 12, 0),
        now=NOW,
    )

    assert status is InventoryStatus.EXPIRED
