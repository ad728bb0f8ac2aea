"""simctl commands for the simrun CLI.

Provides Click-based commands to install apps on, and inspect, iOS simulators.
"""

import logging
import os
from typing import Any, Callable, NoReturn, Optional

import click

from ..bridge import SimctlBridge
from ..bundles import validate_app_bundle
from ..core.config import Config
from ..core.exceptions import BridgeError, SimrunError
from ..core.logging import configure_logging
from ..core.protocols import DeviceLister
from ..core.resilience import retry_with_backoff
from ..devices import resolve_device
from ..devices.simctl import SimControl
from ..reconcile import InstallReconciler

logger = logging.getLogger(__name__)


def _fail(ctx: click.Context, error: SimrunError) -> NoReturn:
    click.echo(f"Error: {error.message}", err=True)
    ctx.exit(1)


def _config(ctx: click.Context) -> Config:
    obj = ctx.ensure_object(dict)
    if obj.get("config") is None:
        try:
            obj["config"] = Config.load()
        except SimrunError as e:
            _fail(ctx, e)
    config = obj["config"]
    if obj.get("debug"):
        config.debug = True

    level = config.log_level
    if obj.get("verbose") and level in ("WARNING", "ERROR", "CRITICAL"):
        level = "INFO"
    configure_logging(level=level, json_format=config.logging.json_format)
    return config


def _sim_control(ctx: click.Context, config: Config) -> DeviceLister:
    obj = ctx.ensure_object(dict)
    if obj.get("sim_control") is None:
        obj["sim_control"] = SimControl(config)
    return obj["sim_control"]


def _bridge_factory(ctx: click.Context) -> Callable[..., Any]:
    return ctx.ensure_object(dict).get("bridge_factory") or SimctlBridge


@click.group()
def simctl_commands() -> None:
    """Commands that drive iOS simulators through simctl."""
    pass


@simctl_commands.command()
@click.option(
    "--app",
    "-a",
    "app_path",
    required=True,
    help="Path to a .app bundle to install on the simulator.",
)
@click.option(
    "--device",
    "-d",
    "device_id",
    default=None,
    help="The device UDID or simulator identifier.",
)
@click.option(
    "--force", "-f", is_flag=True, default=False, help="Force a re-install of the existing app."
)
@click.option("--debug", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def install(
    ctx: click.Context,
    app_path: str,
    device_id: Optional[str],
    force: bool,
    debug: bool,
) -> None:
    """Install an app on a simulator, skipping it when already up to date."""
    config = _config(ctx)
    if debug:
        config.debug = True
    if config.debug:
        configure_logging(level=config.log_level, json_format=config.logging.json_format)

    sim_control = _sim_control(ctx, config)
    make_bridge = _bridge_factory(ctx)
    reconciler = InstallReconciler()

    try:
        devices = sim_control.list_devices()
        default_identifier = (
            sim_control.default_device_identifier() if device_id is None else None
        )
        device = resolve_device(device_id, devices, default_identifier)
        app = validate_app_bundle(app_path, device)

        def attempt():
            bridge = make_bridge(device, app.path, config)
            return reconciler.reconcile(app, device, bridge, force_reinstall=force)

        result = retry_with_backoff(attempt, config.retry_config(), (BridgeError,))
    except SimrunError as e:
        logger.debug(f"install failed: {e.to_dict()}")
        _fail(ctx, e)

    if config.debug:
        click.echo(
            f"Installed '{app.bundle_identifier}' on {device} in "
            f"{result.duration_s:.2f} seconds ({result.outcome.value})."
        )


@simctl_commands.command()
@click.pass_context
def booted(ctx: click.Context) -> None:
    """Print details about the booted simulator."""
    config = _config(ctx)
    try:
        device = _sim_control(ctx, config).booted_device()
    except SimrunError as e:
        _fail(ctx, e)

    if device is None:
        click.echo("No simulator is booted.")
    else:
        click.echo(str(device))


@simctl_commands.command()
@click.pass_context
def tail(ctx: click.Context) -> None:
    """Tail the log file of the booted simulator."""
    config = _config(ctx)
    try:
        device = _sim_control(ctx, config).booted_device()
    except SimrunError as e:
        _fail(ctx, e)

    if device is None:
        click.echo("Error: No simulator is booted.", err=True)
        ctx.exit(1)
        return

    log_file = device.simulator_log_file_path(config.simulators.core_simulator_logs_dir)
    os.execvp("tail", ["tail", "-F", str(log_file)])


if __name__ == "__main__":
    simctl_commands()
