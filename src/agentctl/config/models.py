"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from agentctl import __version__
from agentctl.config.paths import get_launch_agents_dir, get_logs_path


class ConfigError(Exception):
    """Configuration error."""

    pass


class ModeConfig(BaseModel):
    """Launch parameters for one build mode (release or development)."""

    label: str
    executable: Path
    arguments: list[str] = []
    environment: dict[str, str] = {}

    @field_validator("label")
    @classmethod
    def _check_label(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value or any(c.isspace() for c in value):
            raise ValueError(f"Invalid launchd label: {value!r}")
        return value


class LaunchAgentConfig(BaseModel):
    """Configuration for the managed launch agent.

    ``version`` is the descriptor version bundled with this build. An
    installed descriptor with an older version is rewritten on install.
    """

    version: str = __version__
    release: ModeConfig
    development: ModeConfig
    launch_agents_dir: Path = Field(default_factory=get_launch_agents_dir)
    log_dir: Path = Field(default_factory=get_logs_path)
    run_at_load: bool = True
    keep_alive: bool = True

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("version must not be empty")
        return value


class LaunchctlConfig(BaseModel):
    """Configuration for invoking launchctl."""

    path: str = "launchctl"
    # "legacy" uses load/unload, "domain" uses bootstrap/bootout (macOS 10.11+)
    style: Literal["legacy", "domain"] = "legacy"
    # Seconds before a hung launchctl invocation is killed
    timeout: float = Field(default=10.0, gt=0)


class AgentctlConfig(BaseModel):
    """Root configuration model."""

    release_only: bool = False
    agent: LaunchAgentConfig
    launchctl: LaunchctlConfig = Field(default_factory=LaunchctlConfig)
