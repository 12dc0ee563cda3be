"""Joined read models for the ledger.

Records are combined with their item and location in Python rather than by
storage joins, so the views behave the same on every provider.
"""

from datetime import datetime

from pydantic import BaseModel

from medstock.catalog.item import Item
from medstock.ledger.classification import StockStatus, classify
from medstock.locations.site import Site, StockArea
from medstock.tenancy import owned, scoped


class ItemSummary(BaseModel):
    id: str
    name: str
    description: str | None = None
    kind: str
    drug_code: str | None = None
    is_hazardous: bool = False
    is_high_alert: bool = False
    is_lasa: bool = False

    @property
    def has_safety_flag(self):
        return self.is_hazardous or self.is_high_alert or self.is_lasa

    @classmethod
    def of(cls, item):
        return cls(
            id=str(item.id),
            name=item.name,
            description=item.description,
            kind=item.kind,
            drug_code=item.drug_code,
            is_hazardous=bool(item.is_hazardous),
            is_high_alert=bool(item.is_high_alert),
            is_lasa=bool(item.is_lasa),
        )


class LedgerView(BaseModel):
    id: str
    tenant_id: str
    item_id: str
    stock_area_id: str
    site_id: str
    current_quantity: int
    max_capacity: int | None = None
    reorder_threshold: int | None = None
    status: StockStatus
    item: ItemSummary | None = None
    stock_area_name: str | None = None
    site_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MovementView(BaseModel):
    id: str
    ledger_record_id: str
    item_id: str
    item_name: str | None = None
    stock_area_name: str | None = None
    site_name: str | None = None
    movement_type: str
    quantity_change: int
    previous_quantity: int
    new_quantity: int
    reason: str | None = None
    occurred_at: datetime


def ledger_view(record, item=None, stock_area=None, site=None) -> LedgerView:
    return LedgerView(
        id=str(record.id),
        tenant_id=str(record.tenant_id),
        item_id=str(record.item_id),
        stock_area_id=str(record.stock_area_id),
        site_id=str(record.site_id),
        current_quantity=record.current_quantity or 0,
        max_capacity=record.max_capacity,
        reorder_threshold=record.reorder_threshold,
        status=classify(record),
        item=ItemSummary.of(item) if item is not None else None,
        stock_area_name=stock_area.name if stock_area is not None else None,
        site_name=site.name if site is not None else None,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def single_view(record) -> LedgerView:
    tenant_id = record.tenant_id
    return ledger_view(
        record,
        item=owned(Item, record.item_id, tenant_id, "item"),
        stock_area=owned(StockArea, record.stock_area_id, tenant_id, "stock_area"),
        site=owned(Site, record.site_id, tenant_id, "site"),
    )


class TenantDirectory:
    """Items, stock areas and sites of one tenant, loaded once and indexed by id."""

    def __init__(self, tenant_id):
        self.items = {str(item.id): item for item in scoped(Item, tenant_id)}
        self.stock_areas = {str(area.id): area for area in scoped(StockArea, tenant_id)}
        self.sites = {str(site.id): site for site in scoped(Site, tenant_id)}

    def view(self, record) -> LedgerView:
        return ledger_view(
            record,
            item=self.items.get(str(record.item_id)),
            stock_area=self.stock_areas.get(str(record.stock_area_id)),
            site=self.sites.get(str(record.site_id)),
        )

    def movement_view(self, movement) -> MovementView:
        item = self.items.get(str(movement.item_id))
        area = self.stock_areas.get(str(movement.stock_area_id))
        site = self.sites.get(str(movement.site_id))
        return MovementView(
            id=str(movement.id),
            ledger_record_id=str(movement.ledger_record_id),
            item_id=str(movement.item_id),
            item_name=item.name if item is not None else None,
            stock_area_name=area.name if area is not None else None,
            site_name=site.name if site is not None else None,
            movement_type=movement.movement_type,
            quantity_change=movement.quantity_change or 0,
            previous_quantity=movement.previous_quantity or 0,
            new_quantity=movement.new_quantity or 0,
            reason=movement.reason,
            occurred_at=movement.occurred_at,
        )
