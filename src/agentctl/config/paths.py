"""Centralized path management for agentctl.

Controller state (config, logs) lives under a single base directory which can
be overridden with the AGENTCTL_HOME environment variable. Launch agent
descriptors always go to the per-user LaunchAgents directory.

Default locations:
- Base directory: ~/.agentctl
- Descriptors: ~/Library/LaunchAgents
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "AGENTCTL_HOME"


@lru_cache(maxsize=1)
def get_agentctl_home() -> Path:
    """Get the base directory for agentctl data.

    Resolution order:
    1. AGENTCTL_HOME environment variable (if set)
    2. Platform default (~/.agentctl)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".agentctl"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_agentctl_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the directory the agent's stdout/stderr logs are written to."""
    return get_agentctl_home() / "logs"


def get_launch_agents_dir() -> Path:
    """Get the per-user LaunchAgents directory."""
    return Path.home() / "Library" / "LaunchAgents"
