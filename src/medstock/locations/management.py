"""Site and stock area management: commands and handlers.

Deletes are refused while dependents exist: a site with stock areas, or a
stock area that still holds ledger records.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from medstock.domain import medstock
from medstock.exceptions import ConflictError, validated
from medstock.ledger.record import LedgerRecord
from medstock.locations.site import Site, StockArea
from medstock.locations.views import SiteChanges
from medstock.tenancy import exists, owned, require_tenant

logger = structlog.get_logger(__name__)

SITE_FIELDS = tuple(SiteChanges.model_fields)


@medstock.command(part_of="Site")
class CreateSite:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    address = Text()


@medstock.command(part_of="Site")
class UpdateSite:
    """``changes`` is a JSON object holding only the fields to change."""

    site_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    changes = Text(required=True)


@medstock.command(part_of="Site")
class DeleteSite:
    site_id = Identifier(required=True)
    tenant_id = Identifier(required=True)


@medstock.command(part_of="StockArea")
class CreateStockArea:
    tenant_id = Identifier(required=True)
    site_id = Identifier(required=True)
    name = String(required=True, max_length=255)


@medstock.command(part_of="StockArea")
class UpdateStockArea:
    stock_area_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)


@medstock.command(part_of="StockArea")
class DeleteStockArea:
    stock_area_id = Identifier(required=True)
    tenant_id = Identifier(required=True)


@medstock.command_handler(part_of=Site)
class SiteManagementHandler:
    @handle(CreateSite)
    def create_site(self, command):
        site = Site.create(
            tenant_id=require_tenant(command.tenant_id),
            name=command.name,
            address=command.address,
        )
        current_domain.repository_for(Site).add(site)
        logger.info("site_created", site_id=str(site.id), tenant_id=site.tenant_id)
        return str(site.id)

    @handle(UpdateSite)
    def update_site(self, command):
        site = owned(Site, command.site_id, command.tenant_id, "site")
        try:
            payload = json.loads(command.changes)
        except ValueError:
            raise ValidationError({"changes": ["Changes must be a JSON object"]}) from None
        site.update_details(**validated(SiteChanges, payload))
        current_domain.repository_for(Site).add(site)
        return str(site.id)

    @handle(DeleteSite)
    def delete_site(self, command):
        site = owned(Site, command.site_id, command.tenant_id, "site")
        if exists(StockArea, site_id=str(site.id)):
            logger.warning("site_delete_blocked", site_id=str(site.id), tenant_id=site.tenant_id)
            raise ConflictError({"site": ["Site still has stock areas and cannot be deleted"]})

        current_domain.repository_for(Site)._dao.delete(site)
        logger.info("site_deleted", site_id=str(site.id), tenant_id=site.tenant_id)


@medstock.command_handler(part_of=StockArea)
class StockAreaManagementHandler:
    @handle(CreateStockArea)
    def create_stock_area(self, command):
        site = owned(Site, command.site_id, command.tenant_id, "site")
        area = StockArea.create(site=site, name=command.name)
        current_domain.repository_for(StockArea).add(area)
        logger.info("stock_area_created", stock_area_id=str(area.id), site_id=str(site.id))
        return str(area.id)

    @handle(UpdateStockArea)
    def update_stock_area(self, command):
        area = owned(StockArea, command.stock_area_id, command.tenant_id, "stock_area")
        area.rename(command.name)
        current_domain.repository_for(StockArea).add(area)
        return str(area.id)

    @handle(DeleteStockArea)
    def delete_stock_area(self, command):
        area = owned(StockArea, command.stock_area_id, command.tenant_id, "stock_area")
        if exists(LedgerRecord, stock_area_id=str(area.id)):
            logger.warning("stock_area_delete_blocked", stock_area_id=str(area.id), tenant_id=area.tenant_id)
            raise ConflictError({"stock_area": ["Stock area still holds inventory and cannot be deleted"]})

        current_domain.repository_for(StockArea)._dao.delete(area)
        logger.info("stock_area_deleted", stock_area_id=str(area.id), tenant_id=area.tenant_id)
