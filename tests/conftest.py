"""Shared test fixtures and factories."""

from collections.abc import Sequence
from pathlib import Path

import pytest

from agentctl.config.models import (
    AgentctlConfig,
    LaunchAgentConfig,
    LaunchctlConfig,
    ModeConfig,
)
from agentctl.service.errors import LaunchError
from agentctl.service.runner import CommandOutput

# =============================================================================
# Fake launchctl
# =============================================================================


class FakeRunner:
    """Command runner that records argv and replays scripted responses.

    Responses are keyed by launchctl subcommand ("load", "unload", "list",
    "bootstrap", ...). A response is a (returncode, output) tuple or a
    LaunchError to raise. Unscripted subcommands succeed with no output.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.responses: dict[str, list[tuple[int, str] | LaunchError]] = {}
        self.timeouts: list[float] = []

    def script(self, subcommand: str, *responses: tuple[int, str] | LaunchError):
        self.responses.setdefault(subcommand, []).extend(responses)

    def subcommands(self) -> list[str]:
        return [argv[1] for argv in self.calls]

    async def __call__(self, argv: Sequence[str], timeout: float) -> CommandOutput:
        argv = tuple(argv)
        self.calls.append(argv)
        self.timeouts.append(timeout)

        queue = self.responses.get(argv[1], [])
        response = queue.pop(0) if queue else (0, "")
        if isinstance(response, LaunchError):
            raise response
        returncode, output = response
        return CommandOutput(argv=argv, returncode=returncode, output=output)


def running_listing(label: str, pid: int = 4242, last_exit: int = 0) -> str:
    """Output of `launchctl list <label>` for a loaded agent."""
    return (
        "{\n"
        '\t"LimitLoadToSessionType" = "Aqua";\n'
        f'\t"Label" = "{label}";\n'
        '\t"OnDemand" = false;\n'
        f'\t"LastExitStatus" = {last_exit};\n'
        f'\t"PID" = {pid};\n'
        '\t"Program" = "/usr/local/bin/agent";\n'
        "};\n"
    )


def stopped_listing(label: str, last_exit: int = 0) -> str:
    """Output of `launchctl list <label>` for a loaded agent with no PID."""
    return (
        "{\n"
        f'\t"Label" = "{label}";\n'
        f'\t"LastExitStatus" = {last_exit};\n'
        "};\n"
    )


NOT_FOUND_LISTING = 'Could not find service "io.example.agent" in domain for port\n'


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def launch_agents_dir(tmp_path: Path) -> Path:
    return tmp_path / "LaunchAgents"


@pytest.fixture
def agent_config(tmp_path: Path, launch_agents_dir: Path) -> LaunchAgentConfig:
    """Launch agent configuration writing into tmp_path."""
    return LaunchAgentConfig(
        version="1.1.0",
        release=ModeConfig(
            label="io.example.agent",
            executable=Path("/Applications/Example.app/Contents/MacOS/agent"),
            arguments=["serve"],
        ),
        development=ModeConfig(
            label="io.example.agent.devel",
            executable=Path("/tmp/build/agent"),
            arguments=["serve", "--debug"],
            environment={"AGENT_LOG_LEVEL": "DEBUG"},
        ),
        launch_agents_dir=launch_agents_dir,
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def config(agent_config: LaunchAgentConfig) -> AgentctlConfig:
    return AgentctlConfig(
        release_only=True,
        agent=agent_config,
        launchctl=LaunchctlConfig(timeout=5.0),
    )


@pytest.fixture
def config_toml_content(tmp_path: Path) -> str:
    """Valid TOML config content."""
    return f"""
release_only = true

[agent]
version = "2.0.1"
launch_agents_dir = "{tmp_path / "LaunchAgents"}"
log_dir = "{tmp_path / "logs"}"

[agent.release]
label = "io.example.agent"
executable = "/usr/local/bin/agent"
arguments = ["serve"]

[agent.development]
label = "io.example.agent.devel"
executable = "/tmp/build/agent"

[launchctl]
style = "domain"
timeout = 7.5
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def restore_logging():
    """Undo configure_logging() changes to the root logger."""
    import logging

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
