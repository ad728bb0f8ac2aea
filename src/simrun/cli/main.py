"""
Main CLI entry point for simrun.

Provides the command-line interface with subcommand groups.
"""

import logging

import click

from .. import __version__
from ..core.logging import configure_logging
from .simctl import simctl_commands

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """
    simrun CLI

    Installs app bundles on iOS simulators, re-installing only when the
    installed copy differs from the local bundle.
    """
    # Ensure that ctx.obj exists and is a dict
    ctx.ensure_object(dict)

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = "WARNING"
    configure_logging(level=level)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug


@cli.command()
def version() -> None:
    """Print the version of simrun."""
    click.echo(__version__)


@cli.group()
def simctl() -> None:
    """Interact with Xcode's command-line simctl."""
    pass


for command in simctl_commands.commands.values():
    simctl.add_command(command)


if __name__ == "__main__":
    cli()
