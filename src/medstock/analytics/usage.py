"""Usage analytics and the sources that estimate consumption.

A usage source answers one question per ledger record: how many units were
consumed in the reporting window, and what is the average daily usage. The
analytics themselves are deterministic functions of those answers.

Sources:
    MovementHistoryUsage  real consumption from the movement log (default)
    FixedUsage            caller-supplied averages (planning, tests)
    SimulatedUsage        seeded pseudo-random demo figures
"""

import math
import random
from collections import defaultdict
from datetime import timedelta

from pydantic import BaseModel

from medstock.config import get_settings
from medstock.ledger.operations import movements_between
from medstock.utils.clock import as_utc, utcnow


class UsageFigure(BaseModel):
    consumed: int = 0
    daily_usage: float | None = None


class UsageSource:
    window_days = 30

    def figure_for(self, view) -> UsageFigure:
        raise NotImplementedError


class MovementHistoryUsage(UsageSource):
    """Average daily USAGE consumption per record over the trailing window."""

    def __init__(self, movements, as_of=None, window_days=None):
        self.window_days = window_days or get_settings().usage_window_days
        self.as_of = as_utc(as_of) or utcnow()
        start = self.as_of - timedelta(days=self.window_days)

        self._consumed = defaultdict(int)
        for movement in movements:
            if movement.consumed and start <= as_utc(movement.occurred_at) <= self.as_of:
                self._consumed[str(movement.ledger_record_id)] += movement.consumed

    @classmethod
    def load(cls, tenant_id, as_of=None, window_days=None):
        return cls(movements_between(tenant_id), as_of=as_of, window_days=window_days)

    def figure_for(self, view) -> UsageFigure:
        consumed = self._consumed.get(view.id, 0)
        return UsageFigure(consumed=consumed, daily_usage=consumed / self.window_days)


class FixedUsage(UsageSource):
    """Average daily usage looked up by ledger record id, falling back to item id."""

    def __init__(self, daily_usage, window_days=None):
        self.window_days = window_days or get_settings().usage_window_days
        self._daily = {str(key): value for key, value in daily_usage.items()}

    def figure_for(self, view) -> UsageFigure:
        daily = self._daily.get(view.id, self._daily.get(view.item_id))
        if daily is None:
            return UsageFigure()
        return UsageFigure(consumed=max(round(daily * self.window_days), 0), daily_usage=daily)


class SimulatedUsage(UsageSource):
    """Demo figures: 10 to 59 units a month per record, stable for a given seed."""

    def __init__(self, seed=0, window_days=None):
        self.window_days = window_days or get_settings().usage_window_days
        self.seed = seed

    def figure_for(self, view) -> UsageFigure:
        monthly = random.Random(f"{self.seed}:{view.id}").randint(10, 59)
        daily = monthly / 30
        return UsageFigure(consumed=round(daily * self.window_days), daily_usage=daily)


class UsageRow(BaseModel):
    ledger_record_id: str
    item_id: str
    item_name: str | None = None
    item_kind: str | None = None
    stock_area_name: str | None = None
    site_name: str | None = None
    current_stock: int
    consumed_in_window: int = 0
    average_daily_usage: float = 0.0
    predicted_days_remaining: int | None = None
    is_high_usage: bool = False
    is_hazardous: bool = False
    is_high_alert: bool = False
    is_lasa: bool = False


def days_remaining(current_quantity, daily_usage) -> int | None:
    """Whole days of stock left, or None when stock is not being drawn down."""
    if daily_usage is None or daily_usage <= 0:
        return None
    return math.floor(current_quantity / daily_usage)


def usage_analytics(snapshot, usage: UsageSource) -> list[UsageRow]:
    """One row per ledger record, heaviest consumption first."""
    high_usage_monthly = get_settings().high_usage_monthly_units

    rows = []
    for view in snapshot:
        figure = usage.figure_for(view)
        daily = figure.daily_usage or 0.0
        item = view.item
        rows.append(
            UsageRow(
                ledger_record_id=view.id,
                item_id=view.item_id,
                item_name=item.name if item else None,
                item_kind=item.kind if item else None,
                stock_area_name=view.stock_area_name,
                site_name=view.site_name,
                current_stock=view.current_quantity,
                consumed_in_window=figure.consumed,
                average_daily_usage=round(daily, 2),
                predicted_days_remaining=days_remaining(view.current_quantity, figure.daily_usage),
                is_high_usage=daily * 30 > high_usage_monthly,
                is_hazardous=bool(item and item.is_hazardous),
                is_high_alert=bool(item and item.is_high_alert),
                is_lasa=bool(item and item.is_lasa),
            )
        )

    rows.sort(key=lambda row: (-row.consumed_in_window, row.item_name or "", row.ledger_record_id))
    return rows
