"""Tenant guard: every lookup and query in medstock goes through here.

An entity that exists but belongs to another tenant is reported exactly like
a missing one, so tenants cannot discover each other's ids.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from medstock.config import get_settings
from medstock.exceptions import NotFoundError


def require_tenant(tenant_id) -> str:
    if tenant_id is None or not str(tenant_id).strip():
        raise ValidationError({"tenant_id": ["Tenant is required"]})
    return str(tenant_id)


def not_found(label: str, entity_id) -> NotFoundError:
    return NotFoundError({label: [f"{label.replace('_', ' ').capitalize()} {entity_id} not found"]})


def owned(aggregate_cls, entity_id, tenant_id, label: str):
    """Load an aggregate by id, failing with ``NotFoundError`` unless it belongs to ``tenant_id``."""
    tenant_id = require_tenant(tenant_id)
    if entity_id is None or not str(entity_id).strip():
        raise not_found(label, entity_id)

    try:
        entity = current_domain.repository_for(aggregate_cls).get(str(entity_id))
    except ObjectNotFoundError:
        raise not_found(label, entity_id) from None

    if str(entity.tenant_id) != tenant_id:
        raise not_found(label, entity_id)
    return entity


def fetch_all(aggregate_cls, **filters) -> list:
    """Drain a repository query page by page.

    Repository queries are limited by default, so a single ``.all()`` would
    silently truncate larger tenants.
    """
    dao = current_domain.repository_for(aggregate_cls)._dao
    page_size = get_settings().query_page_size

    results = []
    offset = 0
    while True:
        page = dao.query.filter(**filters).order_by("id").offset(offset).limit(page_size).all()
        results.extend(page.items)
        if len(page.items) < page_size:
            return results
        offset += page_size


def scoped(aggregate_cls, tenant_id, **filters) -> list:
    """All aggregates of ``tenant_id`` matching ``filters``."""
    return fetch_all(aggregate_cls, tenant_id=require_tenant(tenant_id), **filters)


def exists(aggregate_cls, **filters) -> bool:
    dao = current_domain.repository_for(aggregate_cls)._dao
    return bool(dao.query.filter(**filters).limit(1).all().items)
