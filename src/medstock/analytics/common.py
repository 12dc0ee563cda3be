from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class AlertPriority(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


PRIORITY_ORDER = {AlertPriority.HIGH: 0, AlertPriority.MEDIUM: 1, AlertPriority.LOW: 2}


def round_half_up(value) -> int:
    """Round to the nearest integer with halves going up (``round`` would give 84 for 84.5)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part, whole, empty=0.0) -> float:
    if not whole:
        return empty
    return 100.0 * part / whole
