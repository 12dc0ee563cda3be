"""StockMovement: append-only log of every ledger quantity change.

Written in the same unit of work as the ledger change it describes. Usage
analytics and trend reconstruction read from it; it is never replayed to
rebuild ledger state.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String

from medstock.domain import medstock


class MovementType(Enum):
    INITIAL = "INITIAL"
    RESTOCK = "RESTOCK"
    USAGE = "USAGE"
    ADJUSTMENT = "ADJUSTMENT"


@medstock.aggregate
class StockMovement:
    tenant_id = Identifier(required=True)
    ledger_record_id = Identifier(required=True)
    item_id = Identifier(required=True)
    stock_area_id = Identifier(required=True)
    site_id = Identifier(required=True)
    movement_type = String(required=True, max_length=20, choices=MovementType)
    quantity_change = Integer(default=0)
    previous_quantity = Integer(default=0)
    new_quantity = Integer(default=0)
    reason = String(max_length=500)
    occurred_at = DateTime(required=True)

    @classmethod
    def of_change(cls, record, movement_type, previous_quantity, reason=None, occurred_at=None):
        """Describe the change that took ``record`` from ``previous_quantity`` to its current quantity."""
        return cls(
            tenant_id=str(record.tenant_id),
            ledger_record_id=str(record.id),
            item_id=str(record.item_id),
            stock_area_id=str(record.stock_area_id),
            site_id=str(record.site_id),
            movement_type=movement_type.value,
            quantity_change=record.current_quantity - previous_quantity,
            previous_quantity=previous_quantity,
            new_quantity=record.current_quantity,
            reason=reason,
            occurred_at=occurred_at or record.updated_at or datetime.now(UTC),
        )

    @property
    def consumed(self):
        """Units taken out by this movement (0 unless it is usage)."""
        if self.movement_type == MovementType.USAGE.value:
            return -(self.quantity_change or 0)
        return 0
