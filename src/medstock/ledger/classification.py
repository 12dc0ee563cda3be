"""Threshold classifier for ledger records.

Works on anything exposing ``current_quantity`` and ``reorder_threshold``:
aggregates, views, or rows reconstructed for trend reporting.
"""

from enum import Enum


class StockStatus(Enum):
    OUT_OF_STOCK = "OUT_OF_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OK = "OK"


def classify_quantity(quantity, reorder_threshold=None) -> StockStatus:
    if not quantity:
        return StockStatus.OUT_OF_STOCK
    if reorder_threshold is not None and quantity <= reorder_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.OK


def classify(record) -> StockStatus:
    """OUT_OF_STOCK at zero whatever the threshold, LOW_STOCK at or below a set threshold, else OK."""
    return classify_quantity(record.current_quantity, record.reorder_threshold)


def is_low_or_out(record) -> bool:
    return classify(record) is not StockStatus.OK
