"""netadmit: admission rules for DANM network manifests.

This package validates proposed DanmNet, ClusterNetwork and TenantNetwork
manifests before they are persisted: IP subnets and route gateways,
allocation pools (with defaulting), VLAN/VxLAN tags, network IDs and
tenant restrictions.

Example:
    >>> from netadmit import NetworkManifest, Operation, validate_network
    >>> manifest = NetworkManifest.from_k8s(obj)
    >>> result = validate_network(manifest, Operation.CREATE)
    >>> if not result.allowed:
    ...     print(result.message)
"""

from __future__ import annotations

from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Schemas
    "AllocationPool",
    "NetworkManifest",
    "NetworkOptions",
    "Operation",
    "ResourceKind",
    # Registry
    "registered_kinds",
    "rules_for",
    # Runner
    "AdmissionResult",
    "admit",
    "validate_network",
    # Errors
    "NetAdmitError",
    "NetworkValidationError",
    "UnknownKindError",
]


def __getattr__(name: str) -> Any:
    """Lazy import of package components."""
    if name in {"AllocationPool", "NetworkManifest", "NetworkOptions", "Operation", "ResourceKind"}:
        from netadmit import schemas

        return getattr(schemas, name)
    if name in {"registered_kinds", "rules_for"}:
        from netadmit import registry

        return getattr(registry, name)
    if name in {"admit", "validate_network"}:
        from netadmit import validator

        return getattr(validator, name)
    if name == "AdmissionResult":
        from netadmit.result import AdmissionResult

        return AdmissionResult
    if name in {"NetAdmitError", "NetworkValidationError", "UnknownKindError"}:
        from netadmit import exceptions

        return getattr(exceptions, name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
