"""Daily inventory trend reconstructed from the movement log.

The ledger only holds current quantities. A past day's quantity is recovered
by rolling back every movement recorded after the end of that day. Current
reorder thresholds are applied to every day, and records created after a day
are absent from it.
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta

from pydantic import BaseModel

from medstock.ledger.classification import StockStatus, classify_quantity
from medstock.utils.clock import as_utc, utcnow


class TrendPoint(BaseModel):
    day: date
    total_records: int = 0
    total_quantity: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0


def _end_of(day, as_of):
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=as_of.tzinfo)
    return min(end, as_of)


def inventory_trends(snapshot, movements, days=30, as_of=None) -> list[TrendPoint]:
    as_of = as_utc(as_of) or utcnow()

    history = defaultdict(list)
    for movement in movements:
        history[str(movement.ledger_record_id)].append((as_utc(movement.occurred_at), movement.quantity_change or 0))

    points = []
    first_day = (as_of - timedelta(days=days)).date()
    for offset in range(days + 1):
        day = first_day + timedelta(days=offset)
        cutoff = _end_of(day, as_of)
        point = TrendPoint(day=day)

        for view in snapshot:
            created = as_utc(view.created_at)
            if created is not None and created > cutoff:
                continue
            later = sum(change for occurred, change in history.get(view.id, []) if occurred > cutoff)
            quantity = max(view.current_quantity - later, 0)

            point.total_records += 1
            point.total_quantity += quantity
            status = classify_quantity(quantity, view.reorder_threshold)
            if status is StockStatus.LOW_STOCK:
                point.low_stock_count += 1
            elif status is StockStatus.OUT_OF_STOCK:
                point.out_of_stock_count += 1

        points.append(point)
    return points
