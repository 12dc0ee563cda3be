"""Application tests for ledger commands processed directly through the domain."""

import pytest
from medstock.exceptions import InsufficientQuantityError
from medstock.ledger.management import AdjustQuantity, CreateLedgerRecord, DeleteLedgerRecord, SetLedgerFields
from medstock.ledger.record import LedgerRecord
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _create_record(tenant_id, item_id, stock_area_id, **overrides):
    defaults = {
        "tenant_id": tenant_id,
        "item_id": item_id,
        "stock_area_id": stock_area_id,
        "initial_quantity": 30,
        "reorder_threshold": 10,
    }
    defaults.update(overrides)
    return current_domain.process(CreateLedgerRecord(**defaults), asynchronous=False)


class TestLedgerCommands:
    def test_create_returns_id(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id)
        record = current_domain.repository_for(LedgerRecord).get(record_id)
        assert record.current_quantity == 30
        assert record.tenant_id == tenant_id

    def test_initial_quantity_defaults_to_zero(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id, initial_quantity=None)
        assert current_domain.repository_for(LedgerRecord).get(record_id).current_quantity == 0

    def test_adjust_command(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id)
        current_domain.process(
            AdjustQuantity(ledger_record_id=record_id, tenant_id=tenant_id, delta=-12, reason="Dispensed"),
            asynchronous=False,
        )
        assert current_domain.repository_for(LedgerRecord).get(record_id).current_quantity == 18

    def test_adjust_command_rejects_overdraw(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id)
        with pytest.raises(InsufficientQuantityError):
            current_domain.process(
                AdjustQuantity(ledger_record_id=record_id, tenant_id=tenant_id, delta=-40),
                asynchronous=False,
            )
        assert current_domain.repository_for(LedgerRecord).get(record_id).current_quantity == 30

    def test_set_fields_command(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id)
        current_domain.process(
            SetLedgerFields(ledger_record_id=record_id, tenant_id=tenant_id, max_capacity=60),
            asynchronous=False,
        )
        record = current_domain.repository_for(LedgerRecord).get(record_id)
        assert record.max_capacity == 60
        assert record.current_quantity == 30

    def test_set_fields_command_clears_threshold(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id)
        current_domain.process(
            SetLedgerFields(ledger_record_id=record_id, tenant_id=tenant_id, clear_reorder_threshold=True),
            asynchronous=False,
        )
        assert current_domain.repository_for(LedgerRecord).get(record_id).reorder_threshold is None

    def test_set_fields_command_rejects_set_and_clear(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id, max_capacity=50)
        with pytest.raises(ValidationError):
            current_domain.process(
                SetLedgerFields(
                    ledger_record_id=record_id, tenant_id=tenant_id, max_capacity=60, clear_max_capacity=True
                ),
                asynchronous=False,
            )
        assert current_domain.repository_for(LedgerRecord).get(record_id).max_capacity == 50

    def test_delete_command(self, tenant_id, warfarin, stock_area):
        record_id = _create_record(tenant_id, warfarin.id, stock_area.id)
        current_domain.process(
            DeleteLedgerRecord(ledger_record_id=record_id, tenant_id=tenant_id),
            asynchronous=False,
        )
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(LedgerRecord).get(record_id)
