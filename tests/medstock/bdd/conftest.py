"""Shared BDD fixtures and step definitions for the ledger."""

import pytest
from medstock.catalog.operations import create_item
from medstock.ledger.operations import create_record, get_record
from medstock.locations.operations import create_site, create_stock_area
from pytest_bdd import given, parsers, then


@pytest.fixture()
def context():
    return {}


@given(parsers.cfparse('a tenant "{tenant}" with a site "{site_name}" and a stock area "{area_name}"'))
def _(context, tenant, site_name, area_name):
    site = create_site(tenant, site_name)
    context["tenant"] = tenant
    context["stock_area"] = create_stock_area(tenant, site.id, area_name)


@given(parsers.cfparse('a LASA medication "{name}" with drug code "{drug_code}"'))
def _(context, name, drug_code):
    context["item"] = create_item(context["tenant"], name, "MEDICATION", drug_code=drug_code, is_lasa=True)


@given(parsers.cfparse("the medication is stocked with {quantity:d} units and a reorder threshold of {threshold:d}"))
def _(context, quantity, threshold):
    context["record"] = create_record(
        context["item"].id,
        context["stock_area"].id,
        quantity,
        context["tenant"],
        reorder_threshold=threshold,
    )


@then(parsers.cfparse("the quantity is {quantity:d}"))
def _(context, quantity):
    assert get_record(context["record"].id, context["tenant"]).current_quantity == quantity


@then(parsers.cfparse("the record is classified as {status}"))
def _(context, status):
    assert get_record(context["record"].id, context["tenant"]).status.value == status
