"""Item aggregate: a medication or supply a tenant stocks.

Medications must carry a drug code. Safety flags mark hazardous drugs,
high-alert drugs and look-alike/sound-alike (LASA) drugs; analytics and
compliance reporting key off them.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from medstock.catalog.events import ItemCreated, ItemUpdated
from medstock.domain import medstock

_UNSET = object()


class ItemKind(Enum):
    MEDICATION = "MEDICATION"
    SUPPLY = "SUPPLY"


class SafetyFlag(Enum):
    HIGH_ALERT = "High Alert"
    HAZARDOUS = "Hazardous"
    LASA = "LASA"


@medstock.aggregate
class Item:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()
    kind = String(required=True, max_length=20, choices=ItemKind)
    drug_code = String(max_length=50)
    is_hazardous = Boolean(default=False)
    is_high_alert = Boolean(default=False)
    is_lasa = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def medication_must_have_drug_code(self):
        if self.kind == ItemKind.MEDICATION.value and not (self.drug_code or "").strip():
            raise ValidationError({"drug_code": ["Drug code is required for medications"]})

    @property
    def is_medication(self):
        return self.kind == ItemKind.MEDICATION.value

    @property
    def has_safety_flag(self):
        return bool(self.is_hazardous or self.is_high_alert or self.is_lasa)

    @classmethod
    def create(
        cls,
        tenant_id,
        name,
        kind,
        description=None,
        drug_code=None,
        is_hazardous=False,
        is_high_alert=False,
        is_lasa=False,
    ):
        now = datetime.now(UTC)
        item = cls(
            tenant_id=tenant_id,
            name=name,
            kind=kind,
            description=description,
            drug_code=drug_code.strip() if drug_code else None,
            is_hazardous=bool(is_hazardous),
            is_high_alert=bool(is_high_alert),
            is_lasa=bool(is_lasa),
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemCreated(
                item_id=str(item.id),
                tenant_id=str(tenant_id),
                name=item.name,
                kind=item.kind,
                drug_code=item.drug_code,
                is_hazardous=item.is_hazardous,
                is_high_alert=item.is_high_alert,
                is_lasa=item.is_lasa,
                created_at=now,
            )
        )
        return item

    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        kind=_UNSET,
        drug_code=_UNSET,
        is_hazardous=_UNSET,
        is_high_alert=_UNSET,
        is_lasa=_UNSET,
    ):
        """Partial update. Only arguments that are passed are changed.

        Kind and drug code may change together (e.g. a supply reclassified as a
        medication), so the drug code rule is checked once all changes are in.
        """
        with atomic_change(self):
            if name is not _UNSET:
                self.name = name
            if description is not _UNSET:
                self.description = description
            if kind is not _UNSET:
                self.kind = kind
            if drug_code is not _UNSET:
                self.drug_code = drug_code.strip() if drug_code else None
            if is_hazardous is not _UNSET:
                self.is_hazardous = bool(is_hazardous)
            if is_high_alert is not _UNSET:
                self.is_high_alert = bool(is_high_alert)
            if is_lasa is not _UNSET:
                self.is_lasa = bool(is_lasa)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ItemUpdated(
                item_id=str(self.id),
                tenant_id=str(self.tenant_id),
                name=self.name,
                kind=self.kind,
                drug_code=self.drug_code,
                is_hazardous=self.is_hazardous,
                is_high_alert=self.is_high_alert,
                is_lasa=self.is_lasa,
                updated_at=self.updated_at,
            )
        )
