"""Main entry point for the netadmit CLI.

Commands:
    netadmit validate: Validate network manifests against the admission rules
    netadmit rules: List the rule chain of each resource kind

Example:
    $ netadmit --help
    $ netadmit --log-level DEBUG validate networks.yaml
"""

from __future__ import annotations

import sys
from importlib.metadata import version as get_version

import click

from netadmit.cli.rules import rules_command
from netadmit.cli.validate import validate_command
from netadmit.config import get_settings
from netadmit.logging_config import configure_logging


def _get_version() -> str:
    """Get the netadmit package version.

    Returns:
        Version string from package metadata, or 'unknown' if not installed.
    """
    try:
        return get_version("netadmit")
    except Exception:
        return "unknown"


@click.group(
    name="netadmit",
    help="netadmit - Admission rules for DANM network manifests.",
    epilog="Use 'netadmit <command> --help' for command-specific help.",
    context_settings={
        "help_option_names": ["-h", "--help"],
    },
)
@click.version_option(
    version=_get_version(),
    prog_name="netadmit",
    message="%(prog)s %(version)s",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Log level (defaults to NETADMIT_LOG_LEVEL).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Root command group for the netadmit CLI."""
    ctx.ensure_object(dict)
    settings = get_settings()
    configure_logging(
        log_level=log_level or settings.log_level,
        json_output=settings.json_logs,
    )


cli.add_command(validate_command)
cli.add_command(rules_command)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the netadmit CLI.

    Args:
        argv: Command-line arguments (uses sys.argv if None).
    """
    try:
        cli(args=argv, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
