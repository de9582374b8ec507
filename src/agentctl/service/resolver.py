"""Resolve the expected launch agent descriptor from configuration."""

from agentctl.config.models import LaunchAgentConfig
from agentctl.service.types import ServiceDescriptor, ServiceMode


def resolve_descriptor(
    config: LaunchAgentConfig, release_only: bool
) -> ServiceDescriptor:
    """Build the descriptor this build expects to find on disk.

    Performs no I/O, so identical inputs always give equal descriptors.

    Args:
        config: Launch agent configuration.
        release_only: Select the release variant instead of development.

    Returns:
        The expected ServiceDescriptor.
    """
    mode = ServiceMode.RELEASE if release_only else ServiceMode.DEVELOPMENT
    mode_config = config.release if release_only else config.development
    label = mode_config.label

    return ServiceDescriptor(
        label=label,
        descriptor_path=config.launch_agents_dir / f"{label}.plist",
        executable_path=mode_config.executable,
        version=config.version,
        mode=mode,
        arguments=tuple(mode_config.arguments),
        environment=tuple(sorted(mode_config.environment.items())),
        run_at_load=config.run_at_load,
        keep_alive=config.keep_alive,
        stdout_path=config.log_dir / f"{label}.log",
        stderr_path=config.log_dir / f"{label}.err.log",
    )
