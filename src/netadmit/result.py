"""Result type for a rule chain run.

Example:
    >>> from netadmit.result import AdmissionResult
    >>> result = AdmissionResult(
    ...     allowed=False,
    ...     kind="DanmNet",
    ...     operation="CREATE",
    ...     errors=["Spec.NetworkID mandatory parameter is missing!"],
    ...     rules_run=["validate_ipv4_fields", "validate_network_id"],
    ... )
    >>> result.message
    'Spec.NetworkID mandatory parameter is missing!'
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from netadmit.schemas import Operation


class AdmissionResult(BaseModel):
    """Outcome of validating one manifest against its kind's rule chain.

    Attributes:
        allowed: True when no rule raised.
        kind: Resource kind whose chain was run.
        operation: Admission operation that was validated.
        errors: Rejection messages, in rule order.
        failed_rules: Names of the rules that raised, parallel to errors.
        rules_run: Names of the rules that were invoked.
        network: Name of the validated object, if known.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed: bool = Field(..., description="Whether the manifest is admitted")
    kind: str = Field(..., description="Resource kind")
    operation: Operation = Field(..., description="Admission operation")
    errors: list[str] = Field(default_factory=list, description="Rejection messages")
    failed_rules: list[str] = Field(
        default_factory=list, description="Rules that rejected the manifest"
    )
    rules_run: list[str] = Field(default_factory=list, description="Rules invoked")
    network: str = Field(default="", description="metadata.name of the object")

    @property
    def message(self) -> str:
        """Message to return to the API client ("" when allowed)."""
        return "; ".join(self.errors)

    def summary(self) -> dict[str, Any]:
        """Generate a summary dictionary for logging/reporting.

        Returns:
            Dictionary with the outcome and rule counts.
        """
        return {
            "network": self.network,
            "kind": self.kind,
            "operation": self.operation.value,
            "allowed": self.allowed,
            "rules_run": len(self.rules_run),
            "errors_count": len(self.errors),
        }
