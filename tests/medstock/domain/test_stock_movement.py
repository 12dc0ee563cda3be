"""Tests for StockMovement."""

from types import SimpleNamespace

from medstock.ledger.movement import MovementType, StockMovement
from medstock.ledger.record import LedgerRecord


def _make_record():
    return LedgerRecord.create(
        tenant_id="tenant-1",
        item_id="item-001",
        stock_area=SimpleNamespace(id="area-001", site_id="site-001"),
        initial_quantity=20,
    )


class TestStockMovement:
    def test_describes_usage(self):
        record = _make_record()
        previous = record.adjust(-4)
        movement = StockMovement.of_change(record, MovementType.USAGE, previous, reason="Ward round")

        assert movement.ledger_record_id == str(record.id)
        assert movement.site_id == "site-001"
        assert movement.quantity_change == -4
        assert movement.previous_quantity == 20
        assert movement.new_quantity == 16
        assert movement.reason == "Ward round"
        assert movement.consumed == 4

    def test_restock_consumes_nothing(self):
        record = _make_record()
        previous = record.adjust(10)
        movement = StockMovement.of_change(record, MovementType.RESTOCK, previous)
        assert movement.quantity_change == 10
        assert movement.consumed == 0

    def test_occurred_at_defaults_to_record_update(self):
        record = _make_record()
        movement = StockMovement.of_change(record, MovementType.INITIAL, 0)
        assert movement.occurred_at == record.updated_at
        assert movement.quantity_change == 20
