"""Headline inventory statistics over a ledger snapshot."""

from pydantic import BaseModel

from medstock.ledger.classification import StockStatus


class InventoryStatistics(BaseModel):
    total_records: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    total_quantity: int = 0
    average_quantity: float = 0.0


def inventory_statistics(snapshot) -> InventoryStatistics:
    """Counts by classification plus sum and mean of quantities.

    LOW_STOCK and OUT_OF_STOCK are disjoint, so an empty record counts only as
    out of stock.
    """
    stats = InventoryStatistics(total_records=len(snapshot))
    for view in snapshot:
        stats.total_quantity += view.current_quantity
        if view.status is StockStatus.LOW_STOCK:
            stats.low_stock_count += 1
        elif view.status is StockStatus.OUT_OF_STOCK:
            stats.out_of_stock_count += 1

    if snapshot:
        stats.average_quantity = stats.total_quantity / len(snapshot)
    return stats
