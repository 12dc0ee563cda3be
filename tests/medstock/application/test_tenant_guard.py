"""Application tests for the tenant guard helpers."""

import pytest
from medstock.config import reset_settings
from medstock.exceptions import NotFoundError, ValidationError
from medstock.locations.operations import create_site
from medstock.locations.site import Site
from medstock.tenancy import exists, owned, require_tenant, scoped


@pytest.fixture()
def small_pages(monkeypatch):
    monkeypatch.setenv("MEDSTOCK_QUERY_PAGE_SIZE", "2")
    reset_settings()
    yield
    monkeypatch.delenv("MEDSTOCK_QUERY_PAGE_SIZE")
    reset_settings()


class TestTenantGuard:
    @pytest.mark.parametrize("tenant", [None, "", "   "])
    def test_tenant_is_required(self, tenant):
        with pytest.raises(ValidationError):
            require_tenant(tenant)

    def test_scoped_drains_every_page(self, tenant_id, small_pages):
        for index in range(5):
            create_site(tenant_id, f"Site {index}")
        create_site("tenant-2", "Elsewhere")

        assert len(scoped(Site, tenant_id)) == 5

    def test_owned_returns_aggregate(self, tenant_id, site):
        assert owned(Site, site.id, tenant_id, "site").name == "General Hospital"

    def test_owned_rejects_blank_id(self, tenant_id):
        with pytest.raises(NotFoundError):
            owned(Site, "", tenant_id, "site")

    def test_not_found_message_names_the_entity(self, tenant_id):
        with pytest.raises(NotFoundError) as exc:
            owned(Site, "site-404", tenant_id, "stock_area")
        assert exc.value.messages == {"stock_area": ["Stock area site-404 not found"]}

    def test_exists(self, tenant_id, site):
        assert exists(Site, tenant_id=tenant_id)
        assert not exists(Site, tenant_id="tenant-9")
