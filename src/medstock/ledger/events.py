"""Domain events for the LedgerRecord aggregate.

Quantity fields are optional because zero is a legitimate value for all of
them.
"""

from protean.fields import DateTime, Identifier, Integer, String

from medstock.domain import medstock


@medstock.event(part_of="LedgerRecord")
class LedgerRecordCreated:
    """An item was stocked at a stock area for the first time."""

    __version__ = "v1"

    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    stock_area_id = Identifier(required=True)
    site_id = Identifier(required=True)
    initial_quantity = Integer()
    max_capacity = Integer()
    reorder_threshold = Integer()
    created_at = DateTime(required=True)


@medstock.event(part_of="LedgerRecord")
class StockAdjusted:
    """Quantity changed by a relative delta (restock or usage)."""

    __version__ = "v1"

    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    stock_area_id = Identifier(required=True)
    quantity_change = Integer()
    previous_quantity = Integer()
    new_quantity = Integer()
    reason = String(max_length=500)
    adjusted_at = DateTime(required=True)


@medstock.event(part_of="LedgerRecord")
class LedgerFieldsUpdated:
    """Quantity, capacity or threshold overwritten with absolute values."""

    __version__ = "v1"

    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    previous_quantity = Integer()
    current_quantity = Integer()
    max_capacity = Integer()
    reorder_threshold = Integer()
    updated_at = DateTime(required=True)


@medstock.event(part_of="LedgerRecord")
class LowStockDetected:
    """A record is at or below its reorder threshold, or empty."""

    __version__ = "v1"

    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    stock_area_id = Identifier(required=True)
    status = String(required=True)
    current_quantity = Integer()
    reorder_threshold = Integer()
    detected_at = DateTime(required=True)
