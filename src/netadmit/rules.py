"""Admission rules for network manifests.

Each rule is a plain function with the signature::

    rule(old_manifest, new_manifest, operation) -> None

A rule returns None when the manifest satisfies it and raises a
NetworkValidationError subclass describing the first violated condition
otherwise. Rules are independent of each other and may be called in any
order; the registry (netadmit.registry) groups them per resource kind.

Only validate_allocation_pool has a side effect: it writes the defaulted
allocation pool back onto the candidate manifest. The defaulting itself is
available as the pure function default_allocation_pool.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable, Mapping
from typing import TypeAlias

import structlog

from netadmit.addressing import (
    IPV4_ALL_ONES,
    get_broadcast_address,
    int_to_ip,
    ip_to_int,
)
from netadmit.exceptions import (
    AllocPresetOnCreateError,
    AllowedTenantsNotPermittedError,
    GatewayOutsideCidrError,
    InvalidCidrError,
    ManualDeviceOrTagOnCreateError,
    ManualDeviceOrTagOnUpdateError,
    MissingNetworkIdError,
    NetworkIdTooLongError,
    PoolInvertedError,
    PoolOutsideCidrError,
    PoolWithoutCidrError,
    RoutesWithoutCidrError,
    VlanVxlanConflictError,
)
from netadmit.schemas import AllocationPool, NetworkManifest, Operation

logger = structlog.get_logger(__name__)

# Longer IDs break VLAN/VxLAN host interface naming (IFNAMSIZ minus suffix)
MAX_NID_LENGTH = 12

Rule: TypeAlias = Callable[[NetworkManifest | None, NetworkManifest, Operation], None]


def _parse_cidr(cidr: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    """Parse CIDR notation, masking host bits.

    Only a decimal prefix length is accepted; netmask forms such as
    10.0.0.0/255.255.255.0 are rejected.

    Raises:
        ValueError: If the string has no prefix length or is not a network.
    """
    _, sep, prefix = cidr.partition("/")
    if not sep or not (prefix.isascii() and prefix.isdigit()):
        raise ValueError(f"prefix length must be a decimal number: {cidr}")
    return ipaddress.ip_network(cidr, strict=False)


def _parse_address(address: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Parse an IP address, unwrapping IPv4-mapped IPv6 addresses.

    Raises:
        ValueError: If the string is not an IP address.
    """
    ip = ipaddress.ip_address(address)
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def _contains(
    network: ipaddress.IPv4Network | ipaddress.IPv6Network,
    address: str,
) -> bool:
    """Check subnet membership; unparsable addresses are never members."""
    try:
        return _parse_address(address) in network
    except ValueError:
        return False


def validate_ip_fields(cidr: str, routes: Mapping[str, str] | None) -> None:
    """Validate a subnet and the gateways of its routes.

    Args:
        cidr: Subnet in CIDR notation; empty for a layer-2 network.
        routes: Destination to gateway mapping.

    Raises:
        RoutesWithoutCidrError: If routes are given without a subnet.
        InvalidCidrError: If the subnet cannot be parsed.
        GatewayOutsideCidrError: If a gateway is not part of the subnet.
    """
    if not cidr:
        if routes:
            raise RoutesWithoutCidrError("IP routes cannot be defined for a L2 network")
        return

    try:
        network = _parse_cidr(cidr)
    except ValueError as e:
        raise InvalidCidrError(f"Invalid CIDR: {cidr}") from e

    for gateway in (routes or {}).values():
        if not _contains(network, gateway):
            raise GatewayOutsideCidrError(
                f"Specified GW address:{gateway} is not part of CIDR:{cidr}"
            )


def validate_ipv4_fields(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Validate the IPv4 subnet and routes."""
    validate_ip_fields(new_manifest.options.cidr, new_manifest.options.routes)


def validate_ipv6_fields(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Validate the IPv6 subnet and routes."""
    validate_ip_fields(new_manifest.options.net6, new_manifest.options.routes6)


def default_allocation_pool(
    network: ipaddress.IPv4Network,
    pool: AllocationPool,
) -> AllocationPool:
    """Fill in missing allocation pool bounds for a subnet.

    An unset start becomes the first address after the network address and
    an unset end becomes the last address before the broadcast address.
    Bounds that are already set are kept as they are. Arithmetic wraps
    around the 32-bit address space, so a /32 yields bounds outside the
    subnet that the pool rule then rejects.

    Args:
        network: The IPv4 subnet of the network.
        pool: The pool as submitted.

    Returns:
        A new AllocationPool with both bounds set. The input is not modified.

    Example:
        >>> default_allocation_pool(
        ...     ipaddress.IPv4Network("10.0.0.0/24"), AllocationPool()
        ... )
        AllocationPool(start='10.0.0.1', end='10.0.0.254')
    """
    start = pool.start
    end = pool.end
    if not start:
        start = str(int_to_ip((ip_to_int(network.network_address) + 1) & IPV4_ALL_ONES))
    if not end:
        end = str(int_to_ip((ip_to_int(get_broadcast_address(network)) - 1) & IPV4_ALL_ONES))
    return AllocationPool(start=start, end=end)


def validate_allocation_pool(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Validate the allocation bitmask and pool, defaulting unset bounds.

    On success or on a pool range failure the defaulted bounds have been
    written to ``new_manifest.options.pool``; callers must treat the manifest
    as modified after running this rule.

    Raises:
        AllocPresetOnCreateError: If alloc is set on creation.
        PoolWithoutCidrError: If a pool bound is set without a subnet.
        InvalidCidrError: If cidr is not an IPv4 subnet.
        PoolOutsideCidrError: If a pool bound is outside the subnet.
        PoolInvertedError: If the pool end is not after its start.
    """
    options = new_manifest.options
    if operation == Operation.CREATE and options.alloc:
        raise AllocPresetOnCreateError(
            "Allocation bitmask shall not be manually defined upon creation!"
        )

    if not options.cidr:
        if options.pool.start or options.pool.end:
            raise PoolWithoutCidrError("Allocation pool cannot be defined without CIDR!")
        return

    try:
        network = _parse_cidr(options.cidr)
    except ValueError as e:
        raise InvalidCidrError(f"Invalid CIDR parameter: {options.cidr}") from e
    if not isinstance(network, ipaddress.IPv4Network):
        raise InvalidCidrError(f"Invalid CIDR parameter: {options.cidr}")

    pool = default_allocation_pool(network, options.pool)
    if pool != options.pool:
        logger.debug(
            "allocation_pool.defaulted",
            network=new_manifest.name,
            start=pool.start,
            end=pool.end,
        )
        options.pool = pool

    if not _contains(network, pool.start) or not _contains(network, pool.end):
        raise PoolOutsideCidrError("Allocation pool is outside of defined CIDR")
    if ip_to_int(_parse_address(pool.end)) <= ip_to_int(_parse_address(pool.start)):
        raise PoolInvertedError(
            f"Allocation pool start:{pool.start} is bigger than or equal to "
            f"allocation pool end:{pool.end}"
        )


def validate_vids(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Reject manifests setting both a VLAN and a VxLAN ID."""
    if new_manifest.options.vlan != 0 and new_manifest.options.vxlan != 0:
        raise VlanVxlanConflictError("VLAN ID and VxLAN ID parameters are mutually exclusive")


def validate_network_id(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Require a network ID of at most MAX_NID_LENGTH characters."""
    if not new_manifest.network_id:
        raise MissingNetworkIdError("Spec.NetworkID mandatory parameter is missing!")
    if len(new_manifest.network_id) > MAX_NID_LENGTH:
        raise NetworkIdTooLongError(
            f"Spec.NetworkID cannot be longer than {MAX_NID_LENGTH} characters "
            "(otherwise VLAN and VxLAN host interface creation might fail)!"
        )


def validate_absence_of_allowed_tenants(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Reject AllowedTenants on kinds other than ClusterNetwork."""
    if new_manifest.allowed_tenants is not None:
        raise AllowedTenantsNotPermittedError(
            "AllowedTenants attribute is only valid for the ClusterNetwork API!"
        )


def validate_tenant_net_rules(
    old_manifest: NetworkManifest | None,
    new_manifest: NetworkManifest,
    operation: Operation,
) -> None:
    """Keep host device and tags of tenant networks under operator control.

    On UPDATE the previous manifest must be supplied by the caller.
    """
    new = new_manifest.options
    if operation == Operation.CREATE and (new.device or new.vxlan != 0 or new.vlan != 0):
        raise ManualDeviceOrTagOnCreateError(
            "Manually configuring any one of host_device, vlan, or vxlan attributes "
            "is not allowed for TenantNetworks!"
        )
    if operation == Operation.UPDATE:
        old = old_manifest.options  # type: ignore[union-attr]
        if new.device != old.device or new.vxlan != old.vxlan or new.vlan != old.vlan:
            raise ManualDeviceOrTagOnUpdateError(
                "Manually changing any one of host_device, vlan, or vxlan attributes "
                "is not allowed for TenantNetworks!"
            )
