"""Shared pytest fixtures for netadmit tests.

NOTE: Do NOT add __init__.py to test directories - pytest uses importlib mode
which can cause namespace collisions with __init__.py files.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
import structlog

from netadmit.config import reset_settings
from netadmit.observability import reset_for_testing
from netadmit.schemas import NetworkManifest, NetworkOptions


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "requirement(id): mark test as covering a specific admission behavior",
    )


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reset cached settings, OTel singletons and structlog config per test."""
    for name in ("NETADMIT_FAIL_FAST", "NETADMIT_LOG_LEVEL", "NETADMIT_JSON_LOGS"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    reset_for_testing()
    yield
    reset_settings()
    reset_for_testing()
    structlog.reset_defaults()


@pytest.fixture
def make_manifest() -> Callable[..., NetworkManifest]:
    """Factory fixture building manifests from option keyword arguments.

    Usage:
        def test_x(make_manifest: Callable[..., NetworkManifest]) -> None:
            manifest = make_manifest(cidr="10.0.0.0/24", vlan=5)
    """

    def _make(
        network_id: str = "mgmt",
        allowed_tenants: list[str] | None = None,
        kind: str | None = None,
        name: str = "management",
        **options: Any,
    ) -> NetworkManifest:
        return NetworkManifest(
            name=name,
            namespace="vnf",
            kind=kind,
            network_id=network_id,
            allowed_tenants=allowed_tenants,
            options=NetworkOptions(**options),
        )

    return _make


@pytest.fixture
def danmnet_object() -> dict[str, Any]:
    """A DanmNet object as decoded from an admission request."""
    return {
        "apiVersion": "danm.k8s.io/v1",
        "kind": "DanmNet",
        "metadata": {"name": "management", "namespace": "example-vnf"},
        "spec": {
            "NetworkID": "management",
            "NetworkType": "ipvlan",
            "Options": {
                "host_device": "ens4",
                "cidr": "10.0.0.0/24",
                "allocation_pool": {"start": "10.0.0.10", "end": "10.0.0.100"},
                "routes": {"10.20.0.0/24": "10.0.0.1"},
                "container_prefix": "eth0",
                "rt_tables": 201,
                "vlan": 500,
            },
        },
    }
