"""Network admission exceptions.

This module defines the exception hierarchy for network manifest admission.
Every rule failure inherits from NetworkValidationError; the message of each
exception is the human-readable rejection reason returned to the API client.
"""

from __future__ import annotations


class NetAdmitError(Exception):
    """Base exception for all netadmit errors.

    All admission-related exceptions inherit from this class to enable
    consistent error handling in the CLI and in embedding webhooks.
    """

    pass


class NetworkValidationError(NetAdmitError):
    """A network manifest violated an admission rule.

    Attributes:
        rule: Name of the rule that raised the error. Set by the chain
            runner; None when a rule function is called directly.
    """

    rule: str | None = None


class RoutesWithoutCidrError(NetworkValidationError):
    """Routes were declared for a network without an IP subnet.

    Example:
        raise RoutesWithoutCidrError("IP routes cannot be defined for a L2 network")
    """


class InvalidCidrError(NetworkValidationError):
    """A CIDR string could not be parsed.

    Example:
        raise InvalidCidrError("Invalid CIDR: 10.0.0.0/33")
    """


class GatewayOutsideCidrError(NetworkValidationError):
    """A route gateway is not part of the declared subnet."""


class AllocPresetOnCreateError(NetworkValidationError):
    """The allocation bitmask was supplied by the client on creation."""


class PoolWithoutCidrError(NetworkValidationError):
    """An allocation pool bound was set on a layer-2 network."""


class PoolOutsideCidrError(NetworkValidationError):
    """An allocation pool bound lies outside the subnet."""


class PoolInvertedError(NetworkValidationError):
    """The allocation pool end is not greater than its start."""


class VlanVxlanConflictError(NetworkValidationError):
    """Both a VLAN and a VxLAN ID were set."""


class MissingNetworkIdError(NetworkValidationError):
    """The mandatory network identifier is empty."""


class NetworkIdTooLongError(NetworkValidationError):
    """The network identifier exceeds the host interface name budget."""


class ManualDeviceOrTagOnCreateError(NetworkValidationError):
    """A tenant network was created with a host device or tag set."""


class ManualDeviceOrTagOnUpdateError(NetworkValidationError):
    """A tenant network update changed its host device or tags."""


class AllowedTenantsNotPermittedError(NetworkValidationError):
    """AllowedTenants was set on a kind other than ClusterNetwork."""


class UnknownKindError(NetAdmitError):
    """No rule chain is registered for the requested resource kind.

    Example:
        raise UnknownKindError("No validation rules registered for kind: Foo")
    """

    pass


class MissingPreviousManifestError(NetAdmitError):
    """An update was submitted without the currently persisted manifest."""

    pass


class ManifestLoadError(NetAdmitError):
    """A Kubernetes object could not be turned into a NetworkManifest."""

    pass
