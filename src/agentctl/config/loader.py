"""Configuration loading from TOML files and environment variables."""

import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from agentctl.config.models import AgentctlConfig, ConfigError
from agentctl.config.paths import get_config_path

TRUE_VALUES = ("1", "true", "yes", "on")


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("agentctl.toml"),  # Current directory
        get_config_path(),  # ~/.agentctl/config.toml (or AGENTCTL_HOME)
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides on top of file values."""
    if (release_only := os.environ.get("AGENTCTL_RELEASE_ONLY")) is not None:
        config["release_only"] = release_only.strip().lower() in TRUE_VALUES

    if launchctl_path := os.environ.get("AGENTCTL_LAUNCHCTL"):
        config.setdefault("launchctl", {})["path"] = launchctl_path

    return config


def load_config(path: Path | None = None) -> AgentctlConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated AgentctlConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If config file is invalid.
    """
    config_path: Path | None = None

    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in default_paths:
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        raise FileNotFoundError(
            f"No config file found. Searched: {', '.join(str(p) for p in default_paths)}"
        )

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    try:
        return AgentctlConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e


def get_default_config() -> AgentctlConfig:
    """Get a default configuration for development/testing.

    Both modes run the agent through the current interpreter; development
    builds use a separate label so they never collide with a release install.
    """
    from agentctl.config.models import LaunchAgentConfig, ModeConfig

    return AgentctlConfig(
        agent=LaunchAgentConfig(
            release=ModeConfig(
                label="io.agentctl.agent",
                executable=Path(sys.executable),
                arguments=["-m", "agent", "serve"],
            ),
            development=ModeConfig(
                label="io.agentctl.agent.devel",
                executable=Path(sys.executable),
                arguments=["-m", "agent", "serve", "--debug"],
                environment={"AGENT_LOG_LEVEL": "DEBUG"},
            ),
        )
    )
