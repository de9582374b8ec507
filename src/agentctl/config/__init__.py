"""Configuration loading and models."""

from agentctl.config.loader import get_default_config, load_config
from agentctl.config.models import (
    AgentctlConfig,
    ConfigError,
    LaunchAgentConfig,
    LaunchctlConfig,
    ModeConfig,
)

__all__ = [
    "AgentctlConfig",
    "ConfigError",
    "LaunchAgentConfig",
    "LaunchctlConfig",
    "ModeConfig",
    "get_default_config",
    "load_config",
]
