"""Rule chains per network resource kind.

The mapping from resource kind to its ordered rule tuple is built once at
import time and exposed read-only. All three chains share the IP field,
allocation pool and network ID rules; they differ in tag and tenant checks:

- DanmNet: VLAN/VxLAN exclusivity, no AllowedTenants.
- ClusterNetwork: VLAN/VxLAN exclusivity, AllowedTenants permitted.
- TenantNetwork: no AllowedTenants, host device and tags locked.

Example:
    >>> from netadmit.registry import rules_for
    >>> for rule in rules_for("TenantNetwork"):
    ...     rule(None, manifest, Operation.CREATE)
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from netadmit.exceptions import UnknownKindError
from netadmit.rules import (
    Rule,
    validate_absence_of_allowed_tenants,
    validate_allocation_pool,
    validate_ipv4_fields,
    validate_ipv6_fields,
    validate_network_id,
    validate_tenant_net_rules,
    validate_vids,
)
from netadmit.schemas import ResourceKind

DANMNET_RULES: tuple[Rule, ...] = (
    validate_ipv4_fields,
    validate_ipv6_fields,
    validate_allocation_pool,
    validate_vids,
    validate_network_id,
    validate_absence_of_allowed_tenants,
)

CLUSTER_NETWORK_RULES: tuple[Rule, ...] = (
    validate_ipv4_fields,
    validate_ipv6_fields,
    validate_allocation_pool,
    validate_vids,
    validate_network_id,
)

TENANT_NETWORK_RULES: tuple[Rule, ...] = (
    validate_ipv4_fields,
    validate_ipv6_fields,
    validate_allocation_pool,
    validate_network_id,
    validate_absence_of_allowed_tenants,
    validate_tenant_net_rules,
)

_RULES_BY_KIND: Mapping[str, tuple[Rule, ...]] = MappingProxyType(
    {
        ResourceKind.DANMNET.value: DANMNET_RULES,
        ResourceKind.CLUSTER_NETWORK.value: CLUSTER_NETWORK_RULES,
        ResourceKind.TENANT_NETWORK.value: TENANT_NETWORK_RULES,
    }
)


def rules_for(kind: str | ResourceKind) -> tuple[Rule, ...]:
    """Return the ordered rule chain for a resource kind.

    Args:
        kind: Resource kind name (e.g. "ClusterNetwork") or ResourceKind.

    Returns:
        Tuple of rule functions to run, in order.

    Raises:
        UnknownKindError: If no chain is registered for the kind.
    """
    key = kind.value if isinstance(kind, ResourceKind) else kind
    try:
        return _RULES_BY_KIND[key]
    except KeyError:
        raise UnknownKindError(f"No validation rules registered for kind: {key}") from None


def registered_kinds() -> tuple[str, ...]:
    """Return the names of all kinds with a registered rule chain."""
    return tuple(_RULES_BY_KIND)


__all__ = [
    "CLUSTER_NETWORK_RULES",
    "DANMNET_RULES",
    "TENANT_NETWORK_RULES",
    "registered_kinds",
    "rules_for",
]
