"""Rule chain runner for network manifest admission.

Selects the rule chain registered for a manifest's kind, runs every rule
against the same candidate manifest object and aggregates the outcome.
With ``fail_fast`` the run stops at the first rejecting rule (the behaviour
of the admission webhook); otherwise every rule runs and all rejection
messages are collected.

Example:
    >>> from netadmit import NetworkManifest, Operation, validate_network
    >>> manifest = NetworkManifest(network_id="ext", kind="ClusterNetwork")
    >>> result = validate_network(manifest, Operation.CREATE)
    >>> result.allowed
    True
"""

from __future__ import annotations

import structlog

from netadmit.config import get_settings
from netadmit.exceptions import (
    MissingPreviousManifestError,
    NetworkValidationError,
    UnknownKindError,
)
from netadmit.observability import record_rejection, start_admission_span
from netadmit.registry import rules_for
from netadmit.result import AdmissionResult
from netadmit.schemas import NetworkManifest, Operation, ResourceKind

logger = structlog.get_logger(__name__)


def _resolve_kind(kind: str | ResourceKind | None, manifest: NetworkManifest) -> str:
    """Pick the explicit kind, falling back to the manifest's own kind."""
    if kind is None:
        kind = manifest.kind
    if not kind:
        raise UnknownKindError(
            f"Resource kind is not set for network: {manifest.name or '<unnamed>'}"
        )
    return kind.value if isinstance(kind, ResourceKind) else kind


def _run_chain(
    new: NetworkManifest,
    operation: Operation,
    kind: str,
    old: NetworkManifest | None,
    fail_fast: bool,
) -> tuple[list[str], list[NetworkValidationError]]:
    """Run the rules of a kind and return (rules run, errors raised)."""
    rules = rules_for(kind)
    if operation == Operation.UPDATE and old is None:
        raise MissingPreviousManifestError(
            f"UPDATE of {kind} {new.name or '<unnamed>'} requires the previous manifest"
        )

    log = logger.bind(network=new.name, kind=kind, operation=operation.value)
    rules_run: list[str] = []
    errors: list[NetworkValidationError] = []

    with start_admission_span(kind, operation.value) as span:
        for rule in rules:
            rules_run.append(rule.__name__)
            try:
                rule(old, new, operation)
            except NetworkValidationError as e:
                e.rule = rule.__name__
                errors.append(e)
                log.debug("rule_rejected", rule=rule.__name__, reason=str(e))
                if fail_fast:
                    break
        span.set_attribute("netadmit.allowed", not errors)
        span.set_attribute("netadmit.rules_run", len(rules_run))

    if errors:
        record_rejection(kind, errors[0].rule or "")
        log.info(
            "network_rejected",
            failed_rules=[e.rule for e in errors],
            reason=str(errors[0]),
        )
    else:
        log.debug("network_admitted", rules_run=len(rules_run))
    return rules_run, errors


def validate_network(
    new: NetworkManifest,
    operation: Operation | str,
    kind: str | ResourceKind | None = None,
    old: NetworkManifest | None = None,
    *,
    fail_fast: bool | None = None,
) -> AdmissionResult:
    """Validate a manifest against its kind's rule chain.

    The allocation pool rule may default ``new.options.pool``; the caller
    should persist ``new`` as modified when the result is allowed.

    Args:
        new: Candidate manifest.
        operation: CREATE or UPDATE.
        kind: Resource kind; defaults to ``new.kind``.
        old: Currently persisted manifest; required for UPDATE.
        fail_fast: Stop at the first rejection. Defaults to the
            NETADMIT_FAIL_FAST setting.

    Returns:
        AdmissionResult with the decision and rejection messages.

    Raises:
        UnknownKindError: If the kind is unset or has no rule chain.
        MissingPreviousManifestError: If operation is UPDATE and old is None.
    """
    operation = Operation(operation)
    kind_name = _resolve_kind(kind, new)
    if fail_fast is None:
        fail_fast = get_settings().fail_fast

    rules_run, errors = _run_chain(new, operation, kind_name, old, fail_fast)
    return AdmissionResult(
        allowed=not errors,
        kind=kind_name,
        operation=operation,
        errors=[str(e) for e in errors],
        failed_rules=[e.rule or "" for e in errors],
        rules_run=rules_run,
        network=new.name,
    )


def admit(
    new: NetworkManifest,
    operation: Operation | str,
    kind: str | ResourceKind | None = None,
    old: NetworkManifest | None = None,
) -> None:
    """Validate a manifest and raise the first rejection.

    Same contract as validate_network with fail_fast, for callers that
    prefer exception flow.

    Raises:
        NetworkValidationError: The first rule rejection, with ``rule`` set.
        UnknownKindError: If the kind is unset or has no rule chain.
        MissingPreviousManifestError: If operation is UPDATE and old is None.
    """
    operation = Operation(operation)
    kind_name = _resolve_kind(kind, new)
    _, errors = _run_chain(new, operation, kind_name, old, fail_fast=True)
    if errors:
        raise errors[0]


__all__ = ["admit", "validate_network"]
