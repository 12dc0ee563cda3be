"""Site and StockArea aggregates.

A Site is a physical facility of a tenant. A StockArea is a named storage
location inside a site and is what ledger records bind to. Each stock area
keeps a copy of its site's tenant so tenant-scoped queries need no join.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from medstock.domain import medstock
from medstock.locations.events import SiteCreated, SiteUpdated, StockAreaCreated, StockAreaRenamed

_UNSET = object()


@medstock.aggregate
class Site:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    address = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, tenant_id, name, address=None):
        now = datetime.now(UTC)
        site = cls(tenant_id=tenant_id, name=name, address=address, created_at=now, updated_at=now)
        site.raise_(
            SiteCreated(
                site_id=str(site.id),
                tenant_id=str(tenant_id),
                name=name,
                address=address,
                created_at=now,
            )
        )
        return site

    def update_details(self, name=_UNSET, address=_UNSET):
        if name is not _UNSET:
            self.name = name
        if address is not _UNSET:
            self.address = address
        self.updated_at = datetime.now(UTC)
        self.raise_(
            SiteUpdated(
                site_id=str(self.id),
                tenant_id=str(self.tenant_id),
                name=self.name,
                address=self.address,
                updated_at=self.updated_at,
            )
        )


@medstock.aggregate
class StockArea:
    tenant_id = Identifier(required=True)
    site_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, site, name):
        """Create a stock area inside ``site``, inheriting the site's tenant."""
        now = datetime.now(UTC)
        area = cls(
            tenant_id=site.tenant_id,
            site_id=str(site.id),
            name=name,
            created_at=now,
            updated_at=now,
        )
        area.raise_(
            StockAreaCreated(
                stock_area_id=str(area.id),
                site_id=str(site.id),
                tenant_id=str(site.tenant_id),
                name=name,
                created_at=now,
            )
        )
        return area

    def rename(self, name):
        previous = self.name
        self.name = name
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAreaRenamed(
                stock_area_id=str(self.id),
                tenant_id=str(self.tenant_id),
                previous_name=previous,
                name=name,
                renamed_at=self.updated_at,
            )
        )
