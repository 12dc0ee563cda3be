"""LedgerRecord aggregate: the stock of one item at one stock area.

This is the only mutable quantity state in medstock. Quantities never go
negative; ``max_capacity`` is a soft target used for utilization reporting
and is not enforced on writes.

Two ways to change a record:
    adjust:      relative delta (restock > 0, usage < 0)
    set_fields:  absolute overwrite of quantity, capacity and/or threshold
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer

from medstock.domain import medstock
from medstock.exceptions import InsufficientQuantityError
from medstock.ledger.classification import StockStatus, classify
from medstock.ledger.events import LedgerFieldsUpdated, LedgerRecordCreated, LowStockDetected, StockAdjusted

_UNSET = object()


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def validate_levels(current_quantity=None, max_capacity=None, reorder_threshold=None):
    """Reject out-of-range levels before anything is mutated."""
    errors = {}
    if current_quantity is not None and (not _is_int(current_quantity) or current_quantity < 0):
        errors["current_quantity"] = ["Quantity must be a whole number of zero or more"]
    if max_capacity is not None and (not _is_int(max_capacity) or max_capacity <= 0):
        errors["max_capacity"] = ["Max capacity must be a positive whole number"]
    if reorder_threshold is not None and (not _is_int(reorder_threshold) or reorder_threshold < 0):
        errors["reorder_threshold"] = ["Reorder threshold must be a whole number of zero or more"]
    if errors:
        raise ValidationError(errors)


@medstock.aggregate
class LedgerRecord:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    stock_area_id = Identifier(required=True)
    site_id = Identifier(required=True)
    current_quantity = Integer(default=0, min_value=0)
    max_capacity = Integer(min_value=1)
    reorder_threshold = Integer(min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def status(self) -> StockStatus:
        return classify(self)

    @classmethod
    def create(cls, tenant_id, item_id, stock_area, initial_quantity=0, max_capacity=None, reorder_threshold=None):
        """Stock ``item_id`` at ``stock_area``. Site and tenant are taken from the stock area."""
        validate_levels(initial_quantity, max_capacity, reorder_threshold)

        now = datetime.now(UTC)
        record = cls(
            tenant_id=tenant_id,
            item_id=str(item_id),
            stock_area_id=str(stock_area.id),
            site_id=str(stock_area.site_id),
            current_quantity=initial_quantity,
            max_capacity=max_capacity,
            reorder_threshold=reorder_threshold,
            created_at=now,
            updated_at=now,
        )
        record.raise_(
            LedgerRecordCreated(
                ledger_record_id=str(record.id),
                tenant_id=str(tenant_id),
                item_id=str(item_id),
                stock_area_id=str(stock_area.id),
                site_id=str(stock_area.site_id),
                initial_quantity=initial_quantity,
                max_capacity=max_capacity,
                reorder_threshold=reorder_threshold,
                created_at=now,
            )
        )
        record._check_low_stock()
        return record

    def _check_low_stock(self):
        """Raise LowStockDetected if the record is low or out of stock."""
        status = self.status
        if status is not StockStatus.OK:
            self.raise_(
                LowStockDetected(
                    ledger_record_id=str(self.id),
                    tenant_id=str(self.tenant_id),
                    item_id=str(self.item_id),
                    stock_area_id=str(self.stock_area_id),
                    status=status.value,
                    current_quantity=self.current_quantity,
                    reorder_threshold=self.reorder_threshold,
                    detected_at=datetime.now(UTC),
                )
            )

    def adjust(self, delta, reason=None):
        """Apply a relative change. Returns the quantity before the change.

        Nothing is modified when the result would be negative.
        """
        if not _is_int(delta) or delta == 0:
            raise ValidationError({"delta": ["Adjustment must be a non-zero whole number"]})

        previous = self.current_quantity or 0
        new_quantity = previous + delta
        if new_quantity < 0:
            raise InsufficientQuantityError(
                {"current_quantity": [f"Insufficient stock: {previous} available, {-delta} requested"]},
                available=previous,
                requested=-delta,
            )

        self.current_quantity = new_quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                ledger_record_id=str(self.id),
                tenant_id=str(self.tenant_id),
                item_id=str(self.item_id),
                stock_area_id=str(self.stock_area_id),
                quantity_change=delta,
                previous_quantity=previous,
                new_quantity=new_quantity,
                reason=reason,
                adjusted_at=self.updated_at,
            )
        )
        self._check_low_stock()
        return previous

    def set_fields(self, current_quantity=_UNSET, max_capacity=_UNSET, reorder_threshold=_UNSET):
        """Overwrite the given levels. Returns the quantity before the change."""
        if all(value is _UNSET for value in (current_quantity, max_capacity, reorder_threshold)):
            raise ValidationError({"ledger_record": ["At least one field must be provided"]})
        if current_quantity is None:
            raise ValidationError({"current_quantity": ["Quantity cannot be cleared"]})

        validate_levels(
            current_quantity=None if current_quantity is _UNSET else current_quantity,
            max_capacity=None if max_capacity is _UNSET else max_capacity,
            reorder_threshold=None if reorder_threshold is _UNSET else reorder_threshold,
        )

        previous = self.current_quantity or 0
        with atomic_change(self):
            if current_quantity is not _UNSET:
                self.current_quantity = current_quantity
            if max_capacity is not _UNSET:
                self.max_capacity = max_capacity
            if reorder_threshold is not _UNSET:
                self.reorder_threshold = reorder_threshold
            self.updated_at = datetime.now(UTC)

        self.raise_(
            LedgerFieldsUpdated(
                ledger_record_id=str(self.id),
                tenant_id=str(self.tenant_id),
                previous_quantity=previous,
                current_quantity=self.current_quantity,
                max_capacity=self.max_capacity,
                reorder_threshold=self.reorder_threshold,
                updated_at=self.updated_at,
            )
        )
        self._check_low_stock()
        return previous
