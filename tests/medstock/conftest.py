import os

import pytest


@pytest.fixture(scope="session")
def _medstock_domain(request):
    """Initialize the medstock domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from medstock.domain import medstock

    medstock.init()
    return medstock


@pytest.fixture(scope="session", autouse=True)
def setup_db(_medstock_domain):
    from medstock.utils.db import drop_db, setup_db

    setup_db(_medstock_domain)

    yield

    drop_db(_medstock_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_medstock_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _medstock_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def tenant_id():
    return "tenant-1"


@pytest.fixture()
def other_tenant_id():
    return "tenant-2"


@pytest.fixture()
def site(tenant_id):
    from medstock.locations.operations import create_site

    return create_site(tenant_id, "General Hospital", address="1 Main St")


@pytest.fixture()
def stock_area(tenant_id, site):
    from medstock.locations.operations import create_stock_area

    return create_stock_area(tenant_id, site.id, "Main Pharmacy")


@pytest.fixture()
def warfarin(tenant_id):
    from medstock.catalog.operations import create_item

    return create_item(tenant_id, "Warfarin 5mg", "MEDICATION", drug_code="WAR001", is_lasa=True)


@pytest.fixture()
def gauze(tenant_id):
    from medstock.catalog.operations import create_item

    return create_item(tenant_id, "Sterile Gauze", "SUPPLY", description="4x4 gauze pads")
