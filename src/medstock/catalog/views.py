"""Read models returned by catalog operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ItemView(BaseModel):
    id: str
    tenant_id: str
    name: str
    description: str | None = None
    kind: str
    drug_code: str | None = None
    is_hazardous: bool = False
    is_high_alert: bool = False
    is_lasa: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, item):
        return cls(
            id=str(item.id),
            tenant_id=str(item.tenant_id),
            name=item.name,
            description=item.description,
            kind=item.kind,
            drug_code=item.drug_code,
            is_hazardous=bool(item.is_hazardous),
            is_high_alert=bool(item.is_high_alert),
            is_lasa=bool(item.is_lasa),
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class SafetyMedicationView(ItemView):
    ledger_record_count: int = 0


class ItemStats(BaseModel):
    total: int = 0
    medications: int = 0
    supplies: int = 0
    hazardous: int = 0
    high_alert: int = 0
    lasa: int = 0


class SafetyAlertSummary(BaseModel):
    hazardous: list[ItemView] = []
    high_alert: list[ItemView] = []
    lasa: list[ItemView] = []
    total: int = 0


class ItemFilter(BaseModel):
    """Filter dimensions for ``list_items``; every dimension left as None is ignored."""

    kind: str | None = None
    is_hazardous: bool | None = None
    is_high_alert: bool | None = None
    is_lasa: bool | None = None
    search: str | None = None

    def matches(self, item) -> bool:
        if self.kind is not None and item.kind != self.kind:
            return False
        for flag in ("is_hazardous", "is_high_alert", "is_lasa"):
            wanted = getattr(self, flag)
            if wanted is not None and bool(getattr(item, flag)) != wanted:
                return False
        if self.search:
            needle = self.search.strip().lower()
            haystack = (item.name, item.description, item.drug_code)
            return any(needle in (value or "").lower() for value in haystack)
        return True


class ItemChanges(BaseModel):
    """Partial item update. Values must already have the right type."""

    model_config = ConfigDict(extra="forbid", strict=True)

    name: str = ""
    description: str | None = None
    kind: str = ""
    drug_code: str | None = None
    is_hazardous: bool = False
    is_high_alert: bool = False
    is_lasa: bool = False
