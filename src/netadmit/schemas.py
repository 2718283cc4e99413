"""Network manifest schemas for admission validation.

This module defines Pydantic models for the network manifests inspected by
the admission rules (DanmNet, ClusterNetwork and TenantNetwork objects) along
with the operation and resource kind enumerations.

Field aliases follow the CRD wire names (``NetworkID``, ``Options``,
``host_device``, ``allocation_pool``...) so a decoded Kubernetes object can be
validated directly, while Python callers may use the snake_case names.

Example:
    >>> from netadmit.schemas import NetworkManifest
    >>> manifest = NetworkManifest.from_k8s(
    ...     {
    ...         "kind": "DanmNet",
    ...         "metadata": {"name": "management", "namespace": "vnf"},
    ...         "spec": {"NetworkID": "mgmt", "Options": {"cidr": "10.0.0.0/24"}},
    ...     }
    ... )
    >>> manifest.options.cidr
    '10.0.0.0/24'
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from netadmit.exceptions import ManifestLoadError


class Operation(str, Enum):
    """Admission operation being validated.

    Values match the ``request.operation`` strings of an AdmissionReview.
    DELETE is not modelled: no rule inspects deletions.
    """

    CREATE = "CREATE"
    UPDATE = "UPDATE"


class ResourceKind(str, Enum):
    """Network resource kinds with a registered rule chain.

    Attributes:
        DANMNET: Per-namespace network managed by the namespace owner.
        CLUSTER_NETWORK: Cluster-scoped network shared across tenants.
        TENANT_NETWORK: Tenant-scoped network with restricted host attachment.
    """

    DANMNET = "DanmNet"
    CLUSTER_NETWORK = "ClusterNetwork"
    TENANT_NETWORK = "TenantNetwork"


class AllocationPool(BaseModel):
    """IPv4 sub-range from which addresses are handed out."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    start: str = Field(default="", description="First allocatable address")
    end: str = Field(default="", description="Last allocatable address")


class NetworkOptions(BaseModel):
    """Addressing and host attachment options of a network."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    cidr: str = Field(default="", description="IPv4 subnet; empty for L2 networks")
    net6: str = Field(default="", description="IPv6 subnet")
    routes: dict[str, str] | None = Field(
        default=None, description="IPv4 destination to gateway mapping"
    )
    routes6: dict[str, str] | None = Field(
        default=None, description="IPv6 destination to gateway mapping"
    )
    pool: AllocationPool = Field(
        default_factory=AllocationPool,
        alias="allocation_pool",
        description="IPv4 allocation pool; defaulted from cidr when unset",
    )
    alloc: str = Field(default="", description="Server computed allocation bitmask")
    vlan: int = Field(default=0, description="VLAN ID; 0 means unset")
    vxlan: int = Field(default=0, description="VxLAN ID; 0 means unset")
    device: str = Field(default="", alias="host_device", description="Host interface")
    container_prefix: str = Field(default="", description="Interface name prefix in pods")
    rt_tables: int = Field(default=0, description="Policy routing table ID")


class NetworkManifest(BaseModel):
    """A network object submitted for admission.

    Instances are transient: built from the incoming request, passed through
    a rule chain and then accepted or rejected. The allocation pool rule may
    write defaults into ``options.pool``; no other field is modified.

    Attributes:
        name: Object name from metadata.
        namespace: Object namespace (None for cluster-scoped objects).
        kind: Resource kind string, if known.
        network_id: Identifier used to derive host interface names.
        network_type: Backend type (ipvlan, sriov, ...); informational.
        allowed_tenants: Tenant list, only meaningful for ClusterNetwork.
        options: Addressing and attachment options.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    name: str = Field(default="", description="metadata.name")
    namespace: str | None = Field(default=None, description="metadata.namespace")
    kind: str | None = Field(default=None, description="Resource kind")
    network_id: str = Field(default="", alias="NetworkID", description="Network ID")
    network_type: str = Field(default="", alias="NetworkType", description="Network type")
    allowed_tenants: list[str] | None = Field(
        default=None,
        alias="AllowedTenants",
        description="Tenants allowed to attach (ClusterNetwork only)",
    )
    options: NetworkOptions = Field(
        default_factory=NetworkOptions,
        alias="Options",
        description="Network options",
    )

    @classmethod
    def from_k8s(cls, obj: dict[str, Any]) -> NetworkManifest:
        """Build a manifest from a decoded Kubernetes object.

        Args:
            obj: Object dictionary with kind, metadata and spec keys.

        Returns:
            The parsed NetworkManifest.

        Raises:
            ManifestLoadError: If the object has no spec or a field has the
                wrong type.
        """
        if not isinstance(obj, dict):
            raise ManifestLoadError(f"Manifest must be a mapping, got {type(obj).__name__}")
        spec = obj.get("spec")
        if not isinstance(spec, dict):
            raise ManifestLoadError("Missing required field: spec")

        metadata = obj.get("metadata") or {}
        data: dict[str, Any] = dict(spec)
        data["name"] = metadata.get("name", "")
        data["namespace"] = metadata.get("namespace")
        data["kind"] = obj.get("kind")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManifestLoadError(f"Invalid manifest {data['name'] or '<unnamed>'}: {e}") from e
