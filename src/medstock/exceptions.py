"""Error kinds surfaced by medstock operations.

All of them carry Protean's ``{field: [message]}`` payload in ``.messages``.
Validation failures reuse Protean's own ``ValidationError`` so that field,
invariant and explicit checks all surface as one type.
"""

import pydantic
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

__all__ = [
    "ConflictError",
    "InsufficientQuantityError",
    "NotFoundError",
    "RecordBusyError",
    "ValidationError",
]


class NotFoundError(ObjectNotFoundError):
    """The entity does not exist or belongs to another tenant.

    Both cases produce the same message so callers cannot discover ids
    owned by other tenants.
    """


class ConflictError(InvalidOperationError):
    """The operation clashes with existing state (duplicate pair, dependents present)."""


class RecordBusyError(ConflictError):
    """A record lock could not be acquired within the configured timeout."""


class InsufficientQuantityError(InvalidOperationError):
    """An adjustment would take a ledger record below zero."""

    def __init__(self, messages, available=None, requested=None, **kwargs):
        super().__init__(messages, **kwargs)
        self.available = available
        self.requested = requested


def from_pydantic(exc) -> ValidationError:
    """Re-express a pydantic ``ValidationError`` in Protean's ``{field: [message]}`` shape."""
    messages = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__all__"
        messages.setdefault(field, []).append(error["msg"])
    return ValidationError(messages)


def validated(model_cls, payload) -> dict:
    """The fields given in ``payload``, checked against the pydantic ``model_cls``."""
    try:
        return model_cls.model_validate(payload).model_dump(exclude_unset=True)
    except pydantic.ValidationError as exc:
        raise from_pydantic(exc) from None
