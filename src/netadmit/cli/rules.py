"""Rules command implementation.

Prints the registered rule chain of each resource kind, in evaluation order.

Example:
    $ netadmit rules
    $ netadmit rules TenantNetwork
"""

from __future__ import annotations

import click

from netadmit.cli.utils import ExitCode, error_exit
from netadmit.exceptions import UnknownKindError
from netadmit.registry import registered_kinds, rules_for


@click.command(
    name="rules",
    help="List the admission rules run for each resource kind.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("kind", required=False, default=None)
def rules_command(kind: str | None) -> None:
    """List the rule chain of one kind, or of every registered kind."""
    kinds = [kind] if kind else list(registered_kinds())
    for name in kinds:
        try:
            chain = rules_for(name)
        except UnknownKindError as e:
            error_exit(str(e), exit_code=ExitCode.USAGE_ERROR)
        click.echo(f"{name}:")
        for position, rule in enumerate(chain, 1):
            click.echo(f"  {position}. {rule.__name__}")


__all__: list[str] = ["rules_command"]
