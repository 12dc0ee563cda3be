"""Safety-medication compliance.

A tenant is fully compliant when every ledger record of a medication carrying
a safety flag (high alert, hazardous, LASA) classifies as OK. Each record
that is low or out of stock produces a critical alert.
"""

from pydantic import BaseModel

from medstock.analytics.common import PRIORITY_ORDER, AlertPriority, round_half_up
from medstock.catalog.item import ItemKind, SafetyFlag
from medstock.ledger.classification import StockStatus

LOW_STOCK_SAFETY_MEDICATION = "LOW_STOCK_SAFETY_MEDICATION"


class CriticalAlert(BaseModel):
    type: str = LOW_STOCK_SAFETY_MEDICATION
    priority: AlertPriority
    ledger_record_id: str
    item_id: str
    item_name: str
    safety_flag: str
    status: StockStatus
    current_quantity: int
    reorder_threshold: int | None = None
    stock_area_name: str | None = None
    site_name: str | None = None
    message: str


class ComplianceMetrics(BaseModel):
    total_medications: int = 0
    hazardous_count: int = 0
    high_alert_count: int = 0
    lasa_count: int = 0
    safety_record_count: int = 0
    compliant_record_count: int = 0
    compliance_score: int = 100
    critical_alerts: list[CriticalAlert] = []


def primary_flag(item) -> SafetyFlag | None:
    if item.is_high_alert:
        return SafetyFlag.HIGH_ALERT
    if item.is_hazardous:
        return SafetyFlag.HAZARDOUS
    if item.is_lasa:
        return SafetyFlag.LASA
    return None


def _alert(view, flag) -> CriticalAlert:
    out = view.status is StockStatus.OUT_OF_STOCK
    state = "is out of stock" if out else "is low on stock"
    return CriticalAlert(
        priority=AlertPriority.HIGH if out else AlertPriority.MEDIUM,
        ledger_record_id=view.id,
        item_id=view.item_id,
        item_name=view.item.name,
        safety_flag=flag.value,
        status=view.status,
        current_quantity=view.current_quantity,
        reorder_threshold=view.reorder_threshold,
        stock_area_name=view.stock_area_name,
        site_name=view.site_name,
        message=f'{flag.value} medication "{view.item.name}" {state}',
    )


def compliance_metrics(snapshot) -> ComplianceMetrics:
    """Safety compliance of a snapshot.

    The score counts ledger records, not medications: a safety-flagged
    medication stocked in three areas contributes three records, and the score
    is the share of those records that are neither low nor out of stock.
    """
    medications = {}
    safety_records = []
    for view in snapshot:
        if view.item is None or view.item.kind != ItemKind.MEDICATION.value:
            continue
        medications[view.item_id] = view.item
        if view.item.has_safety_flag:
            safety_records.append(view)

    alerts = [_alert(view, primary_flag(view.item)) for view in safety_records if view.status is not StockStatus.OK]
    alerts.sort(key=lambda alert: (PRIORITY_ORDER[alert.priority], alert.item_name, alert.ledger_record_id))

    compliant = len(safety_records) - len(alerts)
    score = round_half_up(100 * compliant / len(safety_records)) if safety_records else 100

    return ComplianceMetrics(
        total_medications=len(medications),
        hazardous_count=sum(1 for item in medications.values() if item.is_hazardous),
        high_alert_count=sum(1 for item in medications.values() if item.is_high_alert),
        lasa_count=sum(1 for item in medications.values() if item.is_lasa),
        safety_record_count=len(safety_records),
        compliant_record_count=compliant,
        compliance_score=score,
        critical_alerts=alerts,
    )
