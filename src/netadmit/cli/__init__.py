"""Command-line interface for netadmit.

Example:
    $ netadmit --version
    $ netadmit validate networks.yaml --operation create

Exit Codes:
    0: Success
    1: General error
    2: Usage error (invalid arguments)
    3: File not found
    5: Validation error (a manifest was rejected)
"""

from __future__ import annotations

from netadmit.cli.main import cli, main
from netadmit.cli.utils import ExitCode, error, error_exit, success

__all__: list[str] = [
    "ExitCode",
    "cli",
    "error",
    "error_exit",
    "main",
    "success",
]
