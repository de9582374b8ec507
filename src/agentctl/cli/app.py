"""Main CLI application."""

import typer

from agentctl.cli.commands import service

app = typer.Typer(
    name="agentctl",
    help="agentctl - manage the background agent's launchd service",
    no_args_is_help=True,
)

service.register(app)


if __name__ == "__main__":
    app()
