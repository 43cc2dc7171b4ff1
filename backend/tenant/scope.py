"""
Tenant scope resolution for reference records.

Ingredients, product specifications and recipes are either system-wide
(``tenant_id`` is NULL) or owned by one tenant. The raw nullable column is
converted into an explicit variant here so that every caller handles both
cases and an unexpected value fails loudly instead of being read as "global".
"""
import uuid
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, List, Optional, Union


@dataclass(frozen=True)
class GlobalScope:
    """Record is shared by every tenant."""

    def __str__(self):
        return "global"


@dataclass(frozen=True)
class OwnedBy:
    """Record belongs to a single tenant."""
    tenant_id: uuid.UUID

    def __str__(self):
        return f"tenant:{self.tenant_id}"


Scope = Union[GlobalScope, OwnedBy]

GLOBAL = GlobalScope()


def _normalize_tenant_id(tenant_id) -> Optional[uuid.UUID]:
    if tenant_id is None:
        return None
    if isinstance(tenant_id, uuid.UUID):
        return tenant_id
    # Tenant instances and string ids are both accepted at the boundary
    pk = getattr(tenant_id, 'pk', tenant_id)
    if isinstance(pk, uuid.UUID):
        return pk
    if isinstance(pk, str):
        return uuid.UUID(pk)
    raise TypeError(f"Unsupported tenant identifier: {tenant_id!r}")


def scope_of(record) -> Scope:
    """
    Return the scope variant for a record carrying a nullable ``tenant_id``.

    Raises:
        TypeError: the record has no ``tenant_id`` attribute, or it holds
            something that is neither NULL nor a tenant identifier.
    """
    if isinstance(record, (GlobalScope, OwnedBy)):
        return record
    if not hasattr(record, 'tenant_id'):
        raise TypeError(f"{type(record).__name__} has no tenant_id; cannot determine scope")

    tenant_id = _normalize_tenant_id(record.tenant_id)
    if tenant_id is None:
        return GLOBAL
    return OwnedBy(tenant_id)


def is_visible(record, tenant_id) -> bool:
    """
    Whether ``record`` may be read by ``tenant_id``.

    Global records are visible to every tenant (and to callers without a
    tenant). Tenant-owned records are visible only to their owner.
    """
    scope = scope_of(record)
    if isinstance(scope, GlobalScope):
        return True
    if isinstance(scope, OwnedBy):
        return scope.tenant_id == _normalize_tenant_id(tenant_id)
    raise TypeError(f"Unhandled scope variant: {scope!r}")


def prefer_tenant_owned(
    records: Iterable,
    tenant_id,
    key: Callable[[object], Hashable] = lambda record: None,
) -> List:
    """
    Filter ``records`` to those visible to ``tenant_id`` and, for each logical
    key, keep only the tenant-owned records when any exist.

    Global records survive only for keys the tenant has not overridden.
    Input order is preserved.
    """
    visible = [r for r in records if is_visible(r, tenant_id)]

    owned_keys = {
        key(r) for r in visible
        if isinstance(scope_of(r), OwnedBy)
    }
    return [
        r for r in visible
        if isinstance(scope_of(r), OwnedBy) or key(r) not in owned_keys
    ]
