"""Application tests for catalog operations."""

import pytest
from medstock.catalog.item import Item
from medstock.catalog.management import UpdateItem
from medstock.catalog.operations import (
    create_item,
    delete_item,
    get_item,
    item_stats,
    list_items,
    list_medications_with_safety_flags,
    safety_alert_summary,
    update_item,
)
from medstock.exceptions import ConflictError, NotFoundError, ValidationError
from medstock.ledger.operations import create_record
from protean import current_domain


def _create_item(tenant_id="tenant-1", **overrides):
    defaults = {
        "name": "Warfarin 5mg",
        "kind": "MEDICATION",
        "drug_code": "WAR001",
        "is_lasa": True,
    }
    defaults.update(overrides)
    return create_item(tenant_id, **defaults)


class TestCreateItem:
    def test_create_returns_view(self):
        item = _create_item()
        assert item.id
        assert item.tenant_id == "tenant-1"
        assert item.drug_code == "WAR001"

    def test_create_persists(self):
        item = _create_item()
        stored = current_domain.repository_for(Item).get(item.id)
        assert stored.name == "Warfarin 5mg"

    def test_medication_needs_drug_code(self):
        with pytest.raises(ValidationError):
            _create_item(drug_code=None)
        with pytest.raises(ValidationError):
            _create_item(drug_code="  ")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            _create_item(kind="DEVICE")

    def test_blank_tenant_rejected(self):
        with pytest.raises(ValidationError):
            _create_item(tenant_id=" ")


class TestGetAndUpdateItem:
    def test_get_item(self):
        item = _create_item()
        assert get_item(item.id, "tenant-1").name == "Warfarin 5mg"

    def test_get_item_of_other_tenant_is_not_found(self):
        item = _create_item()
        with pytest.raises(NotFoundError):
            get_item(item.id, "tenant-2")

    def test_get_missing_item(self):
        with pytest.raises(NotFoundError):
            get_item("does-not-exist", "tenant-1")

    def test_partial_update(self):
        item = _create_item(description="Anticoagulant")
        updated = update_item(item.id, "tenant-1", is_high_alert=True)
        assert updated.is_high_alert is True
        assert updated.description == "Anticoagulant"
        assert updated.is_lasa is True

    def test_update_rechecks_drug_code(self):
        item = _create_item()
        with pytest.raises(ValidationError):
            update_item(item.id, "tenant-1", drug_code="")
        assert get_item(item.id, "tenant-1").drug_code == "WAR001"

    def test_update_unknown_field_rejected(self):
        item = _create_item()
        with pytest.raises(ValidationError):
            update_item(item.id, "tenant-1", created_at="2020-01-01")

    def test_update_rejects_wrongly_typed_values(self):
        item = _create_item()
        with pytest.raises(ValidationError) as exc:
            update_item(item.id, "tenant-1", drug_code=123)
        assert "drug_code" in exc.value.messages

        with pytest.raises(ValidationError):
            update_item(item.id, "tenant-1", is_high_alert="yes")

        unchanged = get_item(item.id, "tenant-1")
        assert unchanged.drug_code == "WAR001"
        assert unchanged.is_high_alert is False

    def test_update_command_validates_payload(self):
        item = _create_item()
        for payload in ('{"drug_code": 123}', '{"sku": "X"}', "not json", "[1, 2]"):
            with pytest.raises(ValidationError):
                current_domain.process(
                    UpdateItem(item_id=item.id, tenant_id="tenant-1", changes=payload),
                    asynchronous=False,
                )
        assert get_item(item.id, "tenant-1").drug_code == "WAR001"

    def test_update_by_other_tenant_is_not_found(self):
        item = _create_item()
        with pytest.raises(NotFoundError):
            update_item(item.id, "tenant-2", name="Hijacked")
        assert get_item(item.id, "tenant-1").name == "Warfarin 5mg"


class TestListItems:
    @pytest.fixture(autouse=True)
    def _catalog(self):
        _create_item()
        _create_item(name="Insulin Glargine", drug_code="INS100", is_lasa=False, is_high_alert=True)
        _create_item(name="Sterile Gauze", kind="SUPPLY", drug_code=None, is_lasa=False, description="4x4 pads")
        _create_item(tenant_id="tenant-2", name="Warfarin 1mg", drug_code="WAR002")

    def test_lists_only_own_tenant(self):
        names = {item.name for item in list_items("tenant-1")}
        assert names == {"Warfarin 5mg", "Insulin Glargine", "Sterile Gauze"}

    def test_filter_by_kind(self):
        assert [item.name for item in list_items("tenant-1", kind="SUPPLY")] == ["Sterile Gauze"]

    def test_filter_by_flag(self):
        assert [item.name for item in list_items("tenant-1", is_high_alert=True)] == ["Insulin Glargine"]
        assert len(list_items("tenant-1", is_lasa=False)) == 2

    def test_search_is_case_insensitive_over_name_description_and_code(self):
        assert [item.name for item in list_items("tenant-1", search="warf")] == ["Warfarin 5mg"]
        assert [item.name for item in list_items("tenant-1", search="PADS")] == ["Sterile Gauze"]
        assert [item.name for item in list_items("tenant-1", search="ins100")] == ["Insulin Glargine"]

    def test_dimensions_combine(self):
        assert list_items("tenant-1", kind="SUPPLY", search="warfarin") == []

    def test_unknown_kind_filter_rejected(self):
        with pytest.raises(ValidationError):
            list_items("tenant-1", kind="DEVICE")

    def test_invalid_flag_value_rejected(self):
        with pytest.raises(ValidationError):
            list_items("tenant-1", is_lasa="sometimes")


class TestDeleteItem:
    def test_delete_unstocked_item(self):
        item = _create_item()
        delete_item(item.id, "tenant-1")
        with pytest.raises(NotFoundError):
            get_item(item.id, "tenant-1")

    def test_delete_stocked_item_conflicts(self, tenant_id, stock_area):
        item = _create_item()
        create_record(item.id, stock_area.id, 10, tenant_id)
        with pytest.raises(ConflictError):
            delete_item(item.id, tenant_id)
        assert get_item(item.id, tenant_id).id == item.id

    def test_delete_by_other_tenant_is_not_found(self):
        item = _create_item()
        with pytest.raises(NotFoundError):
            delete_item(item.id, "tenant-2")


class TestSafetyReporting:
    def test_medications_with_safety_flags_ordered_by_name(self, tenant_id, stock_area):
        warfarin = _create_item()
        _create_item(name="Heparin", drug_code="HEP001", is_lasa=False, is_hazardous=True)
        _create_item(name="Paracetamol", drug_code="PAR001", is_lasa=False)
        _create_item(name="Gloves", kind="SUPPLY", drug_code=None, is_lasa=False, is_hazardous=True)
        create_record(warfarin.id, stock_area.id, 10, tenant_id)

        meds = list_medications_with_safety_flags(tenant_id)
        assert [med.name for med in meds] == ["Heparin", "Warfarin 5mg"]
        assert meds[1].ledger_record_count == 1
        assert meds[0].ledger_record_count == 0

    def test_item_stats(self):
        _create_item()
        _create_item(name="Heparin", drug_code="HEP001", is_lasa=False, is_hazardous=True, is_high_alert=True)
        _create_item(name="Gloves", kind="SUPPLY", drug_code=None, is_lasa=False)

        stats = item_stats("tenant-1")
        assert stats.total == 3
        assert stats.medications == 2
        assert stats.supplies == 1
        assert stats.hazardous == 1
        assert stats.high_alert == 1
        assert stats.lasa == 1

    def test_safety_alert_summary_groups_by_flag(self):
        _create_item()
        _create_item(name="Heparin", drug_code="HEP001", is_lasa=True, is_hazardous=True)

        summary = safety_alert_summary("tenant-1")
        assert summary.total == 2
        assert [item.name for item in summary.hazardous] == ["Heparin"]
        assert [item.name for item in summary.lasa] == ["Heparin", "Warfarin 5mg"]
        assert summary.high_alert == []
