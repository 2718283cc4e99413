"""CLI utility functions and error handling.

Errors are written as plain text to stderr with a non-zero exit code so the
CLI can gate manifests in CI pipelines.

Example:
    from netadmit.cli.utils import error_exit, ExitCode

    if not path.exists():
        error_exit("File not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(path))
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from typing import NoReturn


class ExitCode(IntEnum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    """Command completed successfully."""

    GENERAL_ERROR = 1
    """General error (catch-all for failures)."""

    USAGE_ERROR = 2
    """Invalid usage (bad arguments, missing required options)."""

    FILE_NOT_FOUND = 3
    """Required file not found."""

    VALIDATION_ERROR = 5
    """At least one manifest was rejected."""


def _format(prefix: str, message: str, context: dict[str, str | int | bool | None]) -> str:
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        return f"{prefix}: {message} ({context_str})"
    return f"{prefix}: {message}"


def error(message: str, **context: str | int | bool | None) -> None:
    """Print an error message to stderr.

    Example:
        error("Manifest rejected", network="mgmt")
        # Output: Error: Manifest rejected (network=mgmt)
    """
    click.echo(_format("Error", message, context), err=True)


def error_exit(
    message: str,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    **context: str | int | bool | None,
) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Raises:
        SystemExit: Always exits with the specified code.
    """
    error(message, **context)
    sys.exit(exit_code)


def success(message: str) -> None:
    """Print a success message to stdout."""
    click.echo(message)


def info(message: str) -> None:
    """Print an informational message to stderr."""
    click.echo(message, err=True)
