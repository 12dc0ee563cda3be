"""Catalog entry points.

Writes go through the item commands; reads return ``ItemView`` models and are
always scoped to the caller's tenant.
"""

import json

import pydantic
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from medstock.catalog.item import Item, ItemKind
from medstock.catalog.management import UPDATABLE_FIELDS, CreateItem, DeleteItem, UpdateItem
from medstock.catalog.views import (
    ItemChanges,
    ItemFilter,
    ItemStats,
    ItemView,
    SafetyAlertSummary,
    SafetyMedicationView,
)
from medstock.exceptions import from_pydantic, validated
from medstock.ledger.record import LedgerRecord
from medstock.locking import item_key, record_locks
from medstock.tenancy import owned, scoped
from medstock.utils.clock import sort_key


def create_item(
    tenant_id,
    name,
    kind,
    description=None,
    drug_code=None,
    is_hazardous=False,
    is_high_alert=False,
    is_lasa=False,
) -> ItemView:
    item_id = current_domain.process(
        CreateItem(
            tenant_id=tenant_id,
            name=name,
            kind=kind,
            description=description,
            drug_code=drug_code,
            is_hazardous=is_hazardous,
            is_high_alert=is_high_alert,
            is_lasa=is_lasa,
        ),
        asynchronous=False,
    )
    return get_item(item_id, tenant_id)


def get_item(item_id, tenant_id) -> ItemView:
    return ItemView.of(owned(Item, item_id, tenant_id, "item"))


def list_items(tenant_id, kind=None, is_hazardous=None, is_high_alert=None, is_lasa=None, search=None):
    """Items of a tenant, newest first.

    ``search`` is a case-insensitive substring match against name, description
    or drug code. All other dimensions are exact and combine with AND.
    """
    try:
        criteria = ItemFilter(
            kind=kind,
            is_hazardous=is_hazardous,
            is_high_alert=is_high_alert,
            is_lasa=is_lasa,
            search=search,
        )
    except pydantic.ValidationError as exc:
        raise from_pydantic(exc) from None
    if criteria.kind is not None and criteria.kind not in {k.value for k in ItemKind}:
        raise ValidationError({"kind": [f"Unknown item kind {criteria.kind!r}"]})

    items = [item for item in scoped(Item, tenant_id) if criteria.matches(item)]
    items.sort(key=lambda item: sort_key(item.created_at), reverse=True)
    return [ItemView.of(item) for item in items]


def update_item(item_id, tenant_id, **changes) -> ItemView:
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError({field: ["Field cannot be updated"] for field in unknown})
    if not changes:
        raise ValidationError({"item": ["Nothing to update"]})
    changes = validated(ItemChanges, changes)

    current_domain.process(
        UpdateItem(item_id=item_id, tenant_id=tenant_id, changes=json.dumps(changes)),
        asynchronous=False,
    )
    return get_item(item_id, tenant_id)


def delete_item(item_id, tenant_id) -> None:
    # Holding the item lock keeps a concurrent create_record from stocking it mid-delete
    with record_locks.hold(item_key(item_id)):
        current_domain.process(DeleteItem(item_id=item_id, tenant_id=tenant_id), asynchronous=False)


def list_medications_with_safety_flags(tenant_id) -> list[SafetyMedicationView]:
    """Medications with at least one safety flag, ordered by name."""
    medications = [
        item for item in scoped(Item, tenant_id, kind=ItemKind.MEDICATION.value) if item.has_safety_flag
    ]
    medications.sort(key=lambda item: (item.name or "").lower())

    record_counts = {}
    for record in scoped(LedgerRecord, tenant_id):
        record_counts[str(record.item_id)] = record_counts.get(str(record.item_id), 0) + 1

    return [
        SafetyMedicationView(**ItemView.of(item).model_dump(), ledger_record_count=record_counts.get(str(item.id), 0))
        for item in medications
    ]


def item_stats(tenant_id) -> ItemStats:
    stats = ItemStats()
    for item in scoped(Item, tenant_id):
        stats.total += 1
        if item.is_medication:
            stats.medications += 1
        else:
            stats.supplies += 1
        stats.hazardous += int(bool(item.is_hazardous))
        stats.high_alert += int(bool(item.is_high_alert))
        stats.lasa += int(bool(item.is_lasa))
    return stats


def safety_alert_summary(tenant_id) -> SafetyAlertSummary:
    """Safety-flagged medications grouped by flag. An item with several flags appears in each group."""
    medications = list_medications_with_safety_flags(tenant_id)
    return SafetyAlertSummary(
        hazardous=[ItemView(**m.model_dump(exclude={"ledger_record_count"})) for m in medications if m.is_hazardous],
        high_alert=[
            ItemView(**m.model_dump(exclude={"ledger_record_count"})) for m in medications if m.is_high_alert
        ],
        lasa=[ItemView(**m.model_dump(exclude={"ledger_record_count"})) for m in medications if m.is_lasa],
        total=len(medications),
    )
