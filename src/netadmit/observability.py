"""OpenTelemetry instrumentation for netadmit.

Provides a tracer for rule chain runs and a counter of rejected manifests.
Both are lazily created from the globally configured providers, so they are
no-ops until the embedding webhook installs an SDK.

Example:
    >>> from netadmit.observability import start_admission_span, record_rejection
    >>> with start_admission_span("TenantNetwork", "CREATE") as span:
    ...     span.set_attribute("netadmit.allowed", False)
    >>> record_rejection("TenantNetwork", "validate_tenant_net_rules")
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from opentelemetry.metrics import Counter, Meter
    from opentelemetry.trace import Span, Tracer

logger = structlog.get_logger(__name__)

_tracer: Tracer | None = None
_meter: Meter | None = None
_rejections_counter: Counter | None = None

OTEL_SERVICE_NAME = "netadmit"
OTEL_SERVICE_VERSION = "0.1.0"


def get_tracer() -> Tracer:
    """Get or create the netadmit OpenTelemetry tracer."""
    global _tracer

    if _tracer is None:
        from opentelemetry import trace

        _tracer = trace.get_tracer(OTEL_SERVICE_NAME, OTEL_SERVICE_VERSION)
        logger.debug("observability.tracer_initialized", service=OTEL_SERVICE_NAME)

    return _tracer


def get_meter() -> Meter:
    """Get or create the netadmit OpenTelemetry meter."""
    global _meter

    if _meter is None:
        from opentelemetry import metrics

        _meter = metrics.get_meter(
            name=OTEL_SERVICE_NAME,
            version=OTEL_SERVICE_VERSION,
        )
        logger.debug("observability.meter_initialized", service=OTEL_SERVICE_NAME)

    return _meter


def _get_rejections_counter() -> Counter:
    """Get or create the rejections counter."""
    global _rejections_counter

    if _rejections_counter is None:
        _rejections_counter = get_meter().create_counter(
            name="netadmit.rejections",
            description="Count of network manifests rejected by an admission rule",
            unit="{rejections}",
        )
        logger.debug("observability.counter_created", name="netadmit.rejections")

    return _rejections_counter


def record_rejection(kind: str, rule: str) -> None:
    """Increment the rejections counter.

    Args:
        kind: Resource kind of the rejected manifest.
        rule: Name of the rule that rejected it.
    """
    _get_rejections_counter().add(
        1,
        {"netadmit.kind": kind, "netadmit.rule": rule},
    )


def start_admission_span(kind: str, operation: str) -> AbstractContextManager[Span]:
    """Start a span covering one rule chain run.

    Args:
        kind: Resource kind being validated.
        operation: Admission operation (CREATE or UPDATE).

    Returns:
        Span context manager for use in a ``with`` statement.
    """
    return get_tracer().start_as_current_span(
        name="netadmit.validate_network",
        attributes={"netadmit.kind": kind, "netadmit.operation": operation},
    )


def reset_for_testing() -> None:
    """Reset all module-level singletons for testing."""
    global _tracer, _meter, _rejections_counter
    _tracer = None
    _meter = None
    _rejections_counter = None
    logger.debug("observability.reset_for_testing")
