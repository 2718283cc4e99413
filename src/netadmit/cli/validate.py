"""Network validate command implementation.

This module implements the ``netadmit validate`` command which runs the
admission rule chains offline against network manifests stored as YAML:
- Loads every document of the manifest file (multi-document YAML supported)
- Picks the rule chain from each document's kind (or --kind)
- For updates, pairs each document with its previous version from --old
- Reports rejections and exits non-zero if any manifest is rejected

Example:
    $ netadmit validate networks.yaml
    $ netadmit validate networks.yaml --operation update --old live.yaml
    $ netadmit validate networks.yaml --collect-all --output json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import structlog
import yaml

from netadmit.cli.utils import ExitCode, error_exit, info, success
from netadmit.config import get_settings
from netadmit.exceptions import NetAdmitError
from netadmit.registry import registered_kinds
from netadmit.schemas import NetworkManifest, Operation
from netadmit.validator import validate_network

logger = structlog.get_logger(__name__)

ManifestKey = tuple[str | None, str | None, str]


def _load_manifest_file(file_path: Path) -> list[dict[str, Any]]:
    """Load and parse a YAML manifest file.

    Args:
        file_path: Path to the YAML manifest file.

    Returns:
        List of non-empty documents from the file.
    """
    content = file_path.read_text()
    if not content.strip():
        return []

    docs = list(yaml.safe_load_all(content))
    return [d for d in docs if d]


def _manifest_key(obj: dict[str, Any], kind: str | None = None) -> ManifestKey:
    """Identity of an object: (kind, namespace, name).

    A kind override replaces the document's own kind, so documents validated
    with --kind pair up regardless of what kind they declare.
    """
    metadata = obj.get("metadata") or {}
    return kind or obj.get("kind"), metadata.get("namespace"), metadata.get("name", "")


def _index_previous(
    docs: list[dict[str, Any]],
    kind: str | None = None,
) -> dict[ManifestKey, dict[str, Any]]:
    """Index previous manifests by identity for update pairing."""
    return {_manifest_key(doc, kind): doc for doc in docs if isinstance(doc, dict)}


def _validate_document(
    doc: Any,
    operation: Operation,
    kind: str | None,
    previous: dict[ManifestKey, dict[str, Any]],
    fail_fast: bool,
) -> dict[str, Any]:
    """Validate one document and return a JSON-serializable outcome."""
    name = ""
    try:
        new = NetworkManifest.from_k8s(doc)
        name = new.name
        old = None
        if operation == Operation.UPDATE:
            key = _manifest_key(doc, kind)
            if key in previous:
                old = NetworkManifest.from_k8s(previous[key])
        result = validate_network(new, operation, kind=kind, old=old, fail_fast=fail_fast)
    except NetAdmitError as e:
        return {
            "network": name,
            "kind": kind or (doc.get("kind") if isinstance(doc, dict) else None),
            "allowed": False,
            "errors": [str(e)],
        }

    outcome: dict[str, Any] = result.model_dump(mode="json")
    outcome["pool"] = new.options.pool.model_dump()
    return outcome


@click.command(
    name="validate",
    help="Validate network manifests against the admission rules.",
    epilog="""
Examples:
    $ netadmit validate networks.yaml
    $ netadmit validate networks.yaml --operation update --old live.yaml
    $ netadmit validate networks.yaml --kind TenantNetwork --collect-all
""",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument(
    "manifest",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
)
@click.option(
    "--old",
    "old_path",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Currently persisted manifests, required for --operation update.",
    metavar="PATH",
)
@click.option(
    "--operation",
    "-o",
    type=click.Choice(["create", "update"], case_sensitive=False),
    default="create",
    show_default=True,
    help="Admission operation to validate.",
)
@click.option(
    "--kind",
    "-k",
    type=click.Choice(list(registered_kinds())),
    default=None,
    help="Resource kind to validate as (defaults to each document's kind).",
)
@click.option(
    "--collect-all",
    is_flag=True,
    default=False,
    help="Run every rule and report all errors instead of stopping at the first.",
)
@click.option(
    "--output",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)
def validate_command(
    manifest: Path,
    old_path: Path | None,
    operation: str,
    kind: str | None,
    collect_all: bool,
    output: str,
) -> None:
    """Validate network manifests against the admission rules.

    Args:
        manifest: YAML file with one or more network objects.
        old_path: YAML file with the persisted versions (updates only).
        operation: "create" or "update".
        kind: Optional resource kind override.
        collect_all: Collect all rule errors; otherwise NETADMIT_FAIL_FAST decides.
        output: "text" or "json".
    """
    op = Operation(operation.upper())
    fail_fast = False if collect_all else get_settings().fail_fast

    if op == Operation.UPDATE and old_path is None:
        error_exit("--old is required for --operation update", exit_code=ExitCode.USAGE_ERROR)

    try:
        docs = _load_manifest_file(manifest)
        previous = _index_previous(_load_manifest_file(old_path), kind) if old_path else {}
    except FileNotFoundError as e:
        error_exit(f"File not found: {e.filename}", exit_code=ExitCode.FILE_NOT_FOUND)
    except yaml.YAMLError as e:
        error_exit(f"Invalid YAML: {e}", exit_code=ExitCode.VALIDATION_ERROR)

    if not docs:
        info(f"No manifests found in {manifest}")
        return

    outcomes = [_validate_document(doc, op, kind, previous, fail_fast) for doc in docs]
    rejected = [o for o in outcomes if not o["allowed"]]
    logger.debug("cli.validate_finished", manifests=len(outcomes), rejected=len(rejected))

    if output == "json":
        click.echo(json.dumps(outcomes, indent=2))
    else:
        for idx, outcome in enumerate(outcomes, 1):
            if outcome["allowed"]:
                continue
            label = outcome["network"] or f"manifest-{idx}"
            for message in outcome["errors"]:
                click.echo(f"Error: [{label}] {message}", err=True)

    if rejected:
        error_exit(
            f"Validation failed: {len(rejected)}/{len(outcomes)} manifest(s) rejected",
            exit_code=ExitCode.VALIDATION_ERROR,
        )
    if output == "text":
        success(f"Validation complete: {len(outcomes)}/{len(outcomes)} manifest(s) admitted")


__all__: list[str] = ["validate_command"]
