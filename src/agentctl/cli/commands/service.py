"""Launch agent commands."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from agentctl.cli.console import console, create_table, dim, fail, success, warning

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file",
    ),
]
ReleaseOption = Annotated[
    bool | None,
    typer.Option(
        "--release/--development",
        help="Use the release or development agent (default: from config)",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
]


def _build_controller(config_path: Path | None, release: bool | None, verbose: bool):
    """Load configuration and create a LaunchController."""
    from agentctl.config import ConfigError, get_default_config, load_config
    from agentctl.logging import configure_logging
    from agentctl.service import LaunchController

    configure_logging(level="DEBUG" if verbose else None, use_rich=True)

    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        if config_path is not None:
            fail(str(e))
        dim("No config file found, using defaults")
        config = get_default_config()
    except ConfigError as e:
        fail(str(e))

    return LaunchController(config, release_only=release)


def _report(action: str, result) -> None:
    """Print an ExecutionResult and exit non-zero on error."""
    if result.error is not None:
        fail(f"{action} failed: {result.error.message}", result.output)
    if result.warning:
        warning(escape(result.warning))
    success(f"{action} succeeded")


def register(app: typer.Typer) -> None:
    """Register launch agent commands."""

    @app.command("show")
    def show(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Show the resolved descriptor and its install state."""
        from agentctl.service import DescriptorInstaller, LaunchError

        controller = _build_controller(config, release, verbose)
        descriptor = controller.descriptor

        table = create_table(
            "Launch Agent Descriptor",
            [
                ("Property", "cyan"),
                ("Value", ""),
            ],
        )
        table.add_row("Label", descriptor.label)
        table.add_row("Mode", descriptor.mode.value)
        table.add_row("Version", descriptor.version)
        table.add_row("Descriptor", str(descriptor.descriptor_path))
        table.add_row("Program", " ".join(descriptor.program_arguments))
        try:
            state = DescriptorInstaller().inspect(descriptor)
            table.add_row("Install state", state.value)
        except LaunchError as e:
            table.add_row("Install state", f"[red]{e.message}[/red]")

        console.print(table)

    @app.command("install")
    def install(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Install or update the descriptor and make sure the agent runs."""
        controller = _build_controller(config, release, verbose)
        report = asyncio.run(controller.install_launch_agent())

        if report.error is not None:
            fail(f"Install failed: {report.error.message}", report.error.output)

        label = controller.descriptor.label
        if report.action == "reloaded":
            success(f"Installed {label} and reloaded it")
        elif report.action == "loaded":
            success(f"Descriptor current, loaded {label}")
        else:
            success(f"{label} is current and running")

    @app.command("load")
    def load(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Load the agent into launchd."""
        controller = _build_controller(config, release, verbose)
        _report("Load", asyncio.run(controller.load()))

    @app.command("unload")
    def unload(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Unload the agent from launchd."""
        controller = _build_controller(config, release, verbose)
        _report("Unload", asyncio.run(controller.unload()))

    @app.command("reload")
    def reload(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Unload and load the agent."""
        controller = _build_controller(config, release, verbose)
        _report("Reload", asyncio.run(controller.reload()))

    @app.command("status")
    def status(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Show the agent's launchd status."""
        from agentctl.service import StatusKind

        controller = _build_controller(config, release, verbose)
        result = asyncio.run(controller.status())
        if result.error is not None:
            fail(f"Status failed: {result.error.message}", result.output)

        table = create_table(
            "Launch Agent Status",
            [
                ("Property", "cyan"),
                ("Value", ""),
            ],
        )

        state_colors = {
            StatusKind.RUNNING: "green",
            StatusKind.NOT_RUNNING: "yellow",
            StatusKind.RUNNING_WITH_ERRORS: "red",
        }
        service_status = result.status
        table.add_row("Label", controller.descriptor.label)
        if service_status is not None:
            color = state_colors.get(service_status.kind, "white")
            table.add_row("State", f"[{color}]{service_status.kind.value}[/{color}]")
            table.add_row("Loaded", "yes" if service_status.loaded else "no")
            if service_status.pid:
                table.add_row("PID", str(service_status.pid))
            if service_status.last_exit_status is not None:
                table.add_row("Last exit", str(service_status.last_exit_status))

        console.print(table)

    @app.command("uninstall")
    def uninstall(
        config: ConfigOption = None,
        release: ReleaseOption = None,
        verbose: VerboseOption = False,
    ) -> None:
        """Unload the agent and remove its descriptor."""
        controller = _build_controller(config, release, verbose)
        _report("Uninstall", asyncio.run(controller.uninstall_launch_agent()))
