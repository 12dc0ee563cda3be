"""Ledger record commands and handler.

Every quantity change appends a StockMovement in the same unit of work, so
the movement log and the ledger never disagree. Callers serialize writes to
one record with ``medstock.locking`` (see ``medstock.ledger.operations``).
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from medstock.catalog.item import Item
from medstock.domain import medstock
from medstock.exceptions import ConflictError, InsufficientQuantityError
from medstock.ledger.movement import MovementType, StockMovement
from medstock.ledger.record import LedgerRecord
from medstock.locations.site import StockArea
from medstock.tenancy import exists, owned, require_tenant

logger = structlog.get_logger(__name__)


@medstock.command(part_of="LedgerRecord")
class CreateLedgerRecord:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    stock_area_id = Identifier(required=True)
    initial_quantity = Integer(default=0)
    max_capacity = Integer()
    reorder_threshold = Integer()


@medstock.command(part_of="LedgerRecord")
class AdjustQuantity:
    """Relative change: positive restocks, negative records usage."""

    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(max_length=500)


@medstock.command(part_of="LedgerRecord")
class SetLedgerFields:
    """Absolute overwrite; fields left empty are not changed.

    An empty field cannot express "remove this value", so capacity and
    threshold are cleared through the ``clear_*`` flags.
    """

    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    current_quantity = Integer()
    max_capacity = Integer()
    reorder_threshold = Integer()
    clear_max_capacity = Boolean(default=False)
    clear_reorder_threshold = Boolean(default=False)
    reason = String(max_length=500)


@medstock.command(part_of="LedgerRecord")
class DeleteLedgerRecord:
    ledger_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)


def _append_movement(record, movement_type, previous_quantity, reason=None):
    movement = StockMovement.of_change(record, movement_type, previous_quantity, reason=reason)
    current_domain.repository_for(StockMovement).add(movement)
    return movement


@medstock.command_handler(part_of=LedgerRecord)
class LedgerManagementHandler:
    @handle(CreateLedgerRecord)
    def create_record(self, command):
        tenant_id = require_tenant(command.tenant_id)
        item = owned(Item, command.item_id, tenant_id, "item")
        stock_area = owned(StockArea, command.stock_area_id, tenant_id, "stock_area")

        if exists(LedgerRecord, item_id=str(item.id), stock_area_id=str(stock_area.id)):
            logger.warning(
                "ledger_record_duplicate",
                tenant_id=tenant_id,
                item_id=str(item.id),
                stock_area_id=str(stock_area.id),
            )
            raise ConflictError({"ledger_record": ["This item is already stocked at this stock area"]})

        record = LedgerRecord.create(
            tenant_id=tenant_id,
            item_id=item.id,
            stock_area=stock_area,
            initial_quantity=command.initial_quantity if command.initial_quantity is not None else 0,
            max_capacity=command.max_capacity,
            reorder_threshold=command.reorder_threshold,
        )
        current_domain.repository_for(LedgerRecord).add(record)
        _append_movement(record, MovementType.INITIAL, previous_quantity=0, reason="Initial stock")

        logger.info(
            "ledger_record_created",
            ledger_record_id=str(record.id),
            tenant_id=tenant_id,
            quantity=record.current_quantity,
        )
        return str(record.id)

    @handle(AdjustQuantity)
    def adjust_quantity(self, command):
        record = owned(LedgerRecord, command.ledger_record_id, command.tenant_id, "ledger_record")
        try:
            previous = record.adjust(command.delta, reason=command.reason)
        except InsufficientQuantityError as exc:
            logger.warning(
                "stock_adjustment_rejected",
                ledger_record_id=str(record.id),
                available=exc.available,
                requested=exc.requested,
            )
            raise

        current_domain.repository_for(LedgerRecord).add(record)
        movement_type = MovementType.RESTOCK if command.delta > 0 else MovementType.USAGE
        _append_movement(record, movement_type, previous, reason=command.reason)

        logger.info(
            "stock_adjusted",
            ledger_record_id=str(record.id),
            delta=command.delta,
            quantity=record.current_quantity,
            status=record.status.value,
        )
        return str(record.id)

    @handle(SetLedgerFields)
    def set_fields(self, command):
        record = owned(LedgerRecord, command.ledger_record_id, command.tenant_id, "ledger_record")

        provided = {
            field: getattr(command, field)
            for field in ("current_quantity", "max_capacity", "reorder_threshold")
            if getattr(command, field) is not None
        }
        for field in ("max_capacity", "reorder_threshold"):
            if getattr(command, f"clear_{field}"):
                if field in provided:
                    raise ValidationError({field: ["Cannot set and clear a value at the same time"]})
                provided[field] = None
        if not provided:
            raise ValidationError({"ledger_record": ["At least one field must be provided"]})

        previous = record.set_fields(**provided)
        current_domain.repository_for(LedgerRecord).add(record)
        if record.current_quantity != previous:
            _append_movement(record, MovementType.ADJUSTMENT, previous, reason=command.reason or "Manual count")

        logger.info("ledger_fields_set", ledger_record_id=str(record.id), fields=sorted(provided))
        return str(record.id)

    @handle(DeleteLedgerRecord)
    def delete_record(self, command):
        record = owned(LedgerRecord, command.ledger_record_id, command.tenant_id, "ledger_record")
        current_domain.repository_for(LedgerRecord)._dao.delete(record)
        logger.info("ledger_record_deleted", ledger_record_id=str(record.id), tenant_id=record.tenant_id)
