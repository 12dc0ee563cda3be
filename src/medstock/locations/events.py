"""Domain events for the Site and StockArea aggregates."""

from protean.fields import DateTime, Identifier, String, Text

from medstock.domain import medstock


@medstock.event(part_of="Site")
class SiteCreated:
    __version__ = "v1"

    site_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    name = String(required=True)
    address = Text()
    created_at = DateTime(required=True)


@medstock.event(part_of="Site")
class SiteUpdated:
    __version__ = "v1"

    site_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    name = String(required=True)
    address = Text()
    updated_at = DateTime(required=True)


@medstock.event(part_of="StockArea")
class StockAreaCreated:
    __version__ = "v1"

    stock_area_id = Identifier(required=True)
    site_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    name = String(required=True)
    created_at = DateTime(required=True)


@medstock.event(part_of="StockArea")
class StockAreaRenamed:
    __version__ = "v1"

    stock_area_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    previous_name = String(required=True)
    name = String(required=True)
    renamed_at = DateTime(required=True)
