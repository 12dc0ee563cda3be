"""Read models returned by location operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SiteView(BaseModel):
    id: str
    tenant_id: str
    name: str
    address: str | None = None
    stock_area_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, site, stock_area_count=0):
        return cls(
            id=str(site.id),
            tenant_id=str(site.tenant_id),
            name=site.name,
            address=site.address,
            stock_area_count=stock_area_count,
            created_at=site.created_at,
            updated_at=site.updated_at,
        )


class StockAreaView(BaseModel):
    id: str
    tenant_id: str
    site_id: str
    site_name: str | None = None
    name: str
    ledger_record_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def of(cls, area, site_name=None, ledger_record_count=0):
        return cls(
            id=str(area.id),
            tenant_id=str(area.tenant_id),
            site_id=str(area.site_id),
            site_name=site_name,
            name=area.name,
            ledger_record_count=ledger_record_count,
            created_at=area.created_at,
            updated_at=area.updated_at,
        )


class SiteChanges(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: str = ""
    address: str | None = None
