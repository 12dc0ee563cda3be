"""Inventory ledger entry points.

Writes to an existing record hold that record's lock across the whole
command, including the unit-of-work commit, so concurrent adjustments of one
record apply one after the other and never lose an update. Creating a record
holds the item and stock area locks, which keeps the one-record-per-pair rule
intact under concurrent creates and deletes.
"""

from datetime import timedelta

from protean.utils.globals import current_domain

from medstock.catalog.item import ItemKind
from medstock.exceptions import ValidationError
from medstock.ledger.classification import is_low_or_out
from medstock.ledger.management import AdjustQuantity, CreateLedgerRecord, DeleteLedgerRecord, SetLedgerFields
from medstock.ledger.movement import StockMovement
from medstock.ledger.record import LedgerRecord
from medstock.ledger.views import LedgerView, MovementView, TenantDirectory, single_view
from medstock.locking import exclusive, item_key, ledger_key, stock_area_key
from medstock.tenancy import owned, require_tenant, scoped
from medstock.utils.clock import as_utc, sort_key, utcnow

_UNSET = object()


def create_record(
    item_id,
    stock_area_id,
    initial_quantity,
    tenant_id,
    max_capacity=None,
    reorder_threshold=None,
) -> LedgerView:
    with exclusive(item_key(item_id), stock_area_key(stock_area_id)):
        record_id = current_domain.process(
            CreateLedgerRecord(
                tenant_id=tenant_id,
                item_id=item_id,
                stock_area_id=stock_area_id,
                initial_quantity=initial_quantity,
                max_capacity=max_capacity,
                reorder_threshold=reorder_threshold,
            ),
            asynchronous=False,
        )
        return get_record(record_id, tenant_id)


def adjust(record_id, tenant_id, delta, reason=None) -> LedgerView:
    """Add ``delta`` to the record's quantity.

    Raises ``InsufficientQuantityError`` and leaves the record untouched when
    the result would be negative.
    """
    with exclusive(ledger_key(record_id)):
        current_domain.process(
            AdjustQuantity(ledger_record_id=record_id, tenant_id=tenant_id, delta=delta, reason=reason),
            asynchronous=False,
        )
        return get_record(record_id, tenant_id)


def set_fields(
    record_id, tenant_id, current_quantity=_UNSET, max_capacity=_UNSET, reorder_threshold=_UNSET, reason=None
) -> LedgerView:
    """Overwrite the levels that are passed. ``None`` clears capacity or threshold."""
    if current_quantity is None:
        raise ValidationError({"current_quantity": ["Quantity cannot be cleared"]})

    with exclusive(ledger_key(record_id)):
        current_domain.process(
            SetLedgerFields(
                ledger_record_id=record_id,
                tenant_id=tenant_id,
                current_quantity=None if current_quantity is _UNSET else current_quantity,
                max_capacity=None if max_capacity is _UNSET else max_capacity,
                reorder_threshold=None if reorder_threshold is _UNSET else reorder_threshold,
                clear_max_capacity=max_capacity is None,
                clear_reorder_threshold=reorder_threshold is None,
                reason=reason,
            ),
            asynchronous=False,
        )
        return get_record(record_id, tenant_id)


def get_record(record_id, tenant_id) -> LedgerView:
    return single_view(owned(LedgerRecord, record_id, tenant_id, "ledger_record"))


def delete_record(record_id, tenant_id) -> None:
    with exclusive(ledger_key(record_id)):
        current_domain.process(
            DeleteLedgerRecord(ledger_record_id=record_id, tenant_id=tenant_id),
            asynchronous=False,
        )


def list_records(
    tenant_id,
    site_id=None,
    stock_area_id=None,
    item_kind=None,
    low_stock_only=False,
    search=None,
) -> list[LedgerView]:
    """Ledger records of a tenant, most recently updated first.

    ``low_stock_only`` keeps LOW_STOCK and OUT_OF_STOCK records. ``search``
    matches the item name or description, case-insensitively.
    """
    if item_kind is not None and item_kind not in {kind.value for kind in ItemKind}:
        raise ValidationError({"item_kind": [f"Unknown item kind {item_kind!r}"]})

    filters = {}
    if site_id is not None:
        filters["site_id"] = str(site_id)
    if stock_area_id is not None:
        filters["stock_area_id"] = str(stock_area_id)

    records = scoped(LedgerRecord, tenant_id, **filters)
    directory = TenantDirectory(tenant_id)
    needle = search.strip().lower() if search and search.strip() else None

    views = []
    for record in sorted(records, key=lambda r: sort_key(r.updated_at), reverse=True):
        view = directory.view(record)
        if item_kind is not None and (view.item is None or view.item.kind != item_kind):
            continue
        if low_stock_only and not is_low_or_out(view):
            continue
        if needle and not (
            view.item is not None
            and (needle in view.item.name.lower() or needle in (view.item.description or "").lower())
        ):
            continue
        views.append(view)
    return views


def low_stock_records(tenant_id) -> list[LedgerView]:
    """Records with a reorder threshold that are low or out of stock, emptiest first."""
    views = [
        view
        for view in list_records(tenant_id, low_stock_only=True)
        if view.reorder_threshold is not None
    ]
    views.sort(key=lambda view: view.current_quantity)
    return views


def movements_between(tenant_id, start=None, end=None) -> list:
    """Raw movements of a tenant with ``start <= occurred_at <= end``, oldest first."""
    movements = []
    for movement in scoped(StockMovement, tenant_id):
        occurred = as_utc(movement.occurred_at)
        if start is not None and occurred < start:
            continue
        if end is not None and occurred > end:
            continue
        movements.append(movement)
    movements.sort(key=lambda m: sort_key(m.occurred_at))
    return movements


def recent_movements(tenant_id, days=7, as_of=None) -> list[MovementView]:
    """Movements of the last ``days`` days, newest first."""
    tenant_id = require_tenant(tenant_id)
    if days is None or days <= 0:
        raise ValidationError({"days": ["Days must be positive"]})

    as_of = as_utc(as_of) or utcnow()
    movements = movements_between(tenant_id, start=as_of - timedelta(days=days), end=as_of)
    directory = TenantDirectory(tenant_id)
    return [directory.movement_view(movement) for movement in reversed(movements)]
