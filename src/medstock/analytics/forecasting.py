"""Predictive stock-out alerts derived from usage analytics."""

from datetime import datetime, timedelta

from pydantic import BaseModel

from medstock.analytics.common import AlertPriority
from medstock.config import get_settings
from medstock.utils.clock import as_utc, utcnow

PREDICTED_STOCKOUT = "PREDICTED_STOCKOUT"


class PredictiveAlert(BaseModel):
    type: str = PREDICTED_STOCKOUT
    priority: AlertPriority
    ledger_record_id: str
    item_id: str
    item_name: str | None = None
    stock_area_name: str | None = None
    site_name: str | None = None
    current_stock: int
    average_daily_usage: float
    days_until_stockout: int
    predicted_stockout_at: datetime
    message: str


def priority_for(days) -> AlertPriority:
    if days <= 3:
        return AlertPriority.HIGH
    if days <= 7:
        return AlertPriority.MEDIUM
    return AlertPriority.LOW


def predictive_alerts(usage_rows, as_of=None, horizon_days=None) -> list[PredictiveAlert]:
    """Alert for every row expected to run out within the horizon, soonest first.

    Rows already at zero, or not being drawn down, produce no alert.
    """
    horizon = horizon_days or get_settings().predictive_horizon_days
    as_of = as_utc(as_of) or utcnow()

    alerts = []
    for row in usage_rows:
        days = row.predicted_days_remaining
        if days is None or not 0 < days <= horizon:
            continue
        alerts.append(
            PredictiveAlert(
                priority=priority_for(days),
                ledger_record_id=row.ledger_record_id,
                item_id=row.item_id,
                item_name=row.item_name,
                stock_area_name=row.stock_area_name,
                site_name=row.site_name,
                current_stock=row.current_stock,
                average_daily_usage=row.average_daily_usage,
                days_until_stockout=days,
                predicted_stockout_at=as_of + timedelta(days=days),
                message=f"{row.item_name} predicted to run out in {days} days",
            )
        )

    alerts.sort(key=lambda alert: (alert.days_until_stockout, alert.item_name or "", alert.ledger_record_id))
    return alerts
