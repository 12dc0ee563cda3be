"""Location registry entry points."""

import json
from collections import Counter

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from medstock.exceptions import validated
from medstock.ledger.record import LedgerRecord
from medstock.locations.management import (
    SITE_FIELDS,
    CreateSite,
    CreateStockArea,
    DeleteSite,
    DeleteStockArea,
    UpdateSite,
    UpdateStockArea,
)
from medstock.locations.site import Site, StockArea
from medstock.locations.views import SiteChanges, SiteView, StockAreaView
from medstock.locking import record_locks, site_key, stock_area_key
from medstock.tenancy import owned, scoped
from medstock.utils.clock import sort_key


def _area_counts(tenant_id, **filters):
    return Counter(str(area.site_id) for area in scoped(StockArea, tenant_id, **filters))


def _record_counts(tenant_id, **filters):
    return Counter(str(record.stock_area_id) for record in scoped(LedgerRecord, tenant_id, **filters))


# Sites
def create_site(tenant_id, name, address=None) -> SiteView:
    site_id = current_domain.process(CreateSite(tenant_id=tenant_id, name=name, address=address), asynchronous=False)
    return get_site(site_id, tenant_id)


def get_site(site_id, tenant_id) -> SiteView:
    site = owned(Site, site_id, tenant_id, "site")
    return SiteView.of(site, stock_area_count=_area_counts(tenant_id, site_id=str(site.id))[str(site.id)])


def list_sites_by_tenant(tenant_id) -> list[SiteView]:
    """Sites of the tenant, newest first, with their stock area counts."""
    counts = _area_counts(tenant_id)
    sites = sorted(scoped(Site, tenant_id), key=lambda site: sort_key(site.created_at), reverse=True)
    return [SiteView.of(site, stock_area_count=counts[str(site.id)]) for site in sites]


def update_site(site_id, tenant_id, **changes) -> SiteView:
    unknown = sorted(set(changes) - set(SITE_FIELDS))
    if unknown:
        raise ValidationError({field: ["Field cannot be updated"] for field in unknown})
    if not changes:
        raise ValidationError({"site": ["Nothing to update"]})
    changes = validated(SiteChanges, changes)

    current_domain.process(
        UpdateSite(site_id=site_id, tenant_id=tenant_id, changes=json.dumps(changes)),
        asynchronous=False,
    )
    return get_site(site_id, tenant_id)


def delete_site(site_id, tenant_id) -> None:
    with record_locks.hold(site_key(site_id)):
        current_domain.process(DeleteSite(site_id=site_id, tenant_id=tenant_id), asynchronous=False)


# Stock areas
def create_stock_area(tenant_id, site_id, name) -> StockAreaView:
    with record_locks.hold(site_key(site_id)):
        area_id = current_domain.process(
            CreateStockArea(tenant_id=tenant_id, site_id=site_id, name=name),
            asynchronous=False,
        )
    return get_stock_area(area_id, tenant_id)


def get_stock_area(stock_area_id, tenant_id) -> StockAreaView:
    area = owned(StockArea, stock_area_id, tenant_id, "stock_area")
    site = owned(Site, area.site_id, tenant_id, "site")
    counts = _record_counts(tenant_id, stock_area_id=str(area.id))
    return StockAreaView.of(area, site_name=site.name, ledger_record_count=counts[str(area.id)])


def list_stock_areas_by_site(site_id, tenant_id) -> list[StockAreaView]:
    """Stock areas of one site, newest first. A foreign site is reported as missing."""
    site = owned(Site, site_id, tenant_id, "site")
    counts = _record_counts(tenant_id)
    areas = sorted(
        scoped(StockArea, tenant_id, site_id=str(site.id)),
        key=lambda area: sort_key(area.created_at),
        reverse=True,
    )
    return [StockAreaView.of(area, site_name=site.name, ledger_record_count=counts[str(area.id)]) for area in areas]


def list_stock_areas_by_tenant(tenant_id) -> list[StockAreaView]:
    """Every stock area of the tenant, ordered by site name then area name."""
    site_names = {str(site.id): site.name for site in scoped(Site, tenant_id)}
    counts = _record_counts(tenant_id)
    views = [
        StockAreaView.of(area, site_name=site_names.get(str(area.site_id)), ledger_record_count=counts[str(area.id)])
        for area in scoped(StockArea, tenant_id)
    ]
    views.sort(key=lambda view: ((view.site_name or "").lower(), view.name.lower()))
    return views


def update_stock_area(stock_area_id, tenant_id, name) -> StockAreaView:
    current_domain.process(
        UpdateStockArea(stock_area_id=stock_area_id, tenant_id=tenant_id, name=name),
        asynchronous=False,
    )
    return get_stock_area(stock_area_id, tenant_id)


def delete_stock_area(stock_area_id, tenant_id) -> None:
    with record_locks.hold(stock_area_key(stock_area_id)):
        current_domain.process(
            DeleteStockArea(stock_area_id=stock_area_id, tenant_id=tenant_id),
            asynchronous=False,
        )
