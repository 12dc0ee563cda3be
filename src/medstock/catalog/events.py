"""Domain events for the Item aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from medstock.domain import medstock


@medstock.event(part_of="Item")
class ItemCreated:
    """A new item was added to a tenant's catalog."""

    __version__ = "v1"

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    kind = String(required=True)
    drug_code = String(max_length=50)
    is_hazardous = Boolean(default=False)
    is_high_alert = Boolean(default=False)
    is_lasa = Boolean(default=False)
    created_at = DateTime(required=True)


@medstock.event(part_of="Item")
class ItemUpdated:
    """Item details or safety flags changed."""

    __version__ = "v1"

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    kind = String(required=True)
    drug_code = String(max_length=50)
    is_hazardous = Boolean(default=False)
    is_high_alert = Boolean(default=False)
    is_lasa = Boolean(default=False)
    updated_at = DateTime(required=True)
