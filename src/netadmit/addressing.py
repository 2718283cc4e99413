"""IPv4 address arithmetic used by the allocation pool rule.

Thin helpers over the ``ipaddress`` module: integer conversion in both
directions and broadcast address computation for a subnet.
"""

from __future__ import annotations

import ipaddress

IPV4_ALL_ONES = 0xFFFFFFFF


def ip_to_int(address: str | ipaddress.IPv4Address | ipaddress.IPv6Address) -> int:
    """Convert an IP address to its integer value.

    Raises:
        ValueError: If the string is not a valid IP address.
    """
    return int(ipaddress.ip_address(address))


def int_to_ip(value: int, version: int = 4) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Convert an integer back to an IP address of the given version."""
    if version == 6:
        return ipaddress.IPv6Address(value)
    return ipaddress.IPv4Address(value)


def get_broadcast_address(network: ipaddress.IPv4Network) -> ipaddress.IPv4Address:
    """Compute the broadcast address of an IPv4 subnet.

    The broadcast address is the network address OR-ed with the bitwise
    complement of the netmask.

    Args:
        network: The IPv4 subnet.

    Returns:
        The last address of the subnet.

    Example:
        >>> get_broadcast_address(ipaddress.IPv4Network("10.0.0.0/24"))
        IPv4Address('10.0.0.255')
    """
    network_int = ip_to_int(network.network_address)
    mask_int = ip_to_int(network.netmask)
    return ipaddress.IPv4Address(network_int | (~mask_int & IPV4_ALL_ONES))
