"""Tenant-level analytics.

Each function loads a fresh snapshot of the tenant's ledger and hands it to
the pure analytics functions. Snapshots are consistent per call only; they
are not isolated from writes running at the same time.
"""

from pydantic import BaseModel

from medstock.analytics.compliance import ComplianceMetrics, compliance_metrics
from medstock.analytics.forecasting import PredictiveAlert, predictive_alerts
from medstock.analytics.performance import SitePerformance, site_performance
from medstock.analytics.statistics import InventoryStatistics, inventory_statistics
from medstock.analytics.trends import TrendPoint, inventory_trends
from medstock.analytics.usage import MovementHistoryUsage, UsageRow, UsageSource, usage_analytics
from medstock.catalog.operations import item_stats, list_medications_with_safety_flags
from medstock.catalog.views import ItemStats
from medstock.ledger.operations import list_records, low_stock_records, movements_between
from medstock.ledger.views import LedgerView
from medstock.locations.site import Site, StockArea
from medstock.tenancy import require_tenant, scoped
from medstock.utils.clock import as_utc, utcnow

DASHBOARD_LOW_STOCK_LIMIT = 5


def load_snapshot(tenant_id) -> list[LedgerView]:
    return list_records(require_tenant(tenant_id))


def inventory_statistics_for(tenant_id) -> InventoryStatistics:
    return inventory_statistics(load_snapshot(tenant_id))


def usage_analytics_for(tenant_id, usage: UsageSource | None = None, as_of=None) -> list[UsageRow]:
    snapshot = load_snapshot(tenant_id)
    if usage is None:
        usage = MovementHistoryUsage.load(tenant_id, as_of=as_of)
    return usage_analytics(snapshot, usage)


def compliance_metrics_for(tenant_id) -> ComplianceMetrics:
    return compliance_metrics(load_snapshot(tenant_id))


def site_performance_for(tenant_id) -> list[SitePerformance]:
    snapshot = load_snapshot(tenant_id)
    return site_performance(snapshot, scoped(Site, tenant_id), scoped(StockArea, tenant_id))


def predictive_alerts_for(tenant_id, usage: UsageSource | None = None, as_of=None) -> list[PredictiveAlert]:
    as_of = as_utc(as_of) or utcnow()
    return predictive_alerts(usage_analytics_for(tenant_id, usage=usage, as_of=as_of), as_of=as_of)


def inventory_trends_for(tenant_id, days=30, as_of=None) -> list[TrendPoint]:
    snapshot = load_snapshot(tenant_id)
    return inventory_trends(snapshot, movements_between(tenant_id), days=days, as_of=as_of)


class LocationCounts(BaseModel):
    sites: int = 0
    sites_with_stock_areas: int = 0
    stock_areas: int = 0
    stock_areas_with_inventory: int = 0


class DashboardSummary(BaseModel):
    locations: LocationCounts
    items: ItemStats
    inventory: InventoryStatistics
    compliance_score: int
    safety_medication_count: int
    critical_alert_count: int
    low_stock: list[LedgerView]


def dashboard_summary(tenant_id) -> DashboardSummary:
    tenant_id = require_tenant(tenant_id)
    snapshot = load_snapshot(tenant_id)
    sites = scoped(Site, tenant_id)
    areas = scoped(StockArea, tenant_id)

    sites_with_areas = {str(area.site_id) for area in areas}
    areas_with_inventory = {view.stock_area_id for view in snapshot}
    compliance = compliance_metrics(snapshot)

    return DashboardSummary(
        locations=LocationCounts(
            sites=len(sites),
            sites_with_stock_areas=sum(1 for site in sites if str(site.id) in sites_with_areas),
            stock_areas=len(areas),
            stock_areas_with_inventory=sum(1 for area in areas if str(area.id) in areas_with_inventory),
        ),
        items=item_stats(tenant_id),
        inventory=inventory_statistics(snapshot),
        compliance_score=compliance.compliance_score,
        safety_medication_count=len(list_medications_with_safety_flags(tenant_id)),
        critical_alert_count=len(compliance.critical_alerts),
        low_stock=low_stock_records(tenant_id)[:DASHBOARD_LOW_STOCK_LIMIT],
    )
