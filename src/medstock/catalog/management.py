"""Item management: commands and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from medstock.catalog.item import Item
from medstock.catalog.views import ItemChanges
from medstock.domain import medstock
from medstock.exceptions import ConflictError, validated
from medstock.ledger.record import LedgerRecord
from medstock.tenancy import exists, owned, require_tenant

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = tuple(ItemChanges.model_fields)


@medstock.command(part_of="Item")
class CreateItem:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    kind = String(required=True, max_length=20)
    description = Text()
    drug_code = String(max_length=50)
    is_hazardous = Boolean(default=False)
    is_high_alert = Boolean(default=False)
    is_lasa = Boolean(default=False)


@medstock.command(part_of="Item")
class UpdateItem:
    """Partial update; ``changes`` is a JSON object holding only the fields to change."""

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    changes = Text(required=True)


@medstock.command(part_of="Item")
class DeleteItem:
    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)


@medstock.command_handler(part_of=Item)
class ItemManagementHandler:
    @handle(CreateItem)
    def create_item(self, command):
        item = Item.create(
            tenant_id=require_tenant(command.tenant_id),
            name=command.name,
            kind=command.kind,
            description=command.description,
            drug_code=command.drug_code,
            is_hazardous=command.is_hazardous,
            is_high_alert=command.is_high_alert,
            is_lasa=command.is_lasa,
        )
        current_domain.repository_for(Item).add(item)
        logger.info("item_created", item_id=str(item.id), tenant_id=item.tenant_id, kind=item.kind)
        return str(item.id)

    @handle(UpdateItem)
    def update_item(self, command):
        item = owned(Item, command.item_id, command.tenant_id, "item")
        try:
            payload = json.loads(command.changes)
        except ValueError:
            raise ValidationError({"changes": ["Changes must be a JSON object"]}) from None
        changes = validated(ItemChanges, payload)
        item.update_details(**changes)
        current_domain.repository_for(Item).add(item)
        logger.info("item_updated", item_id=str(item.id), fields=sorted(changes))
        return str(item.id)

    @handle(DeleteItem)
    def delete_item(self, command):
        item = owned(Item, command.item_id, command.tenant_id, "item")
        if exists(LedgerRecord, item_id=str(item.id)):
            logger.warning("item_delete_blocked", item_id=str(item.id), tenant_id=item.tenant_id)
            raise ConflictError({"item": ["Item is stocked at one or more stock areas and cannot be deleted"]})

        current_domain.repository_for(Item)._dao.delete(item)
        logger.info("item_deleted", item_id=str(item.id), tenant_id=item.tenant_id)
