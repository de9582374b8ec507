"""Composite launch agent operations."""

import logging

from agentctl.config.models import AgentctlConfig
from agentctl.service.client import ServiceControlClient
from agentctl.service.errors import LaunchError
from agentctl.service.installer import DescriptorInstaller
from agentctl.service.resolver import resolve_descriptor
from agentctl.service.runner import CommandRunner
from agentctl.service.types import (
    ExecutionResult,
    InstallReport,
    ServiceDescriptor,
    StatusKind,
)

logger = logging.getLogger(__name__)


class LaunchController:
    """Resolves, installs and controls the configured launch agent.

    Example:
        controller = LaunchController(load_config(), release_only=True)
        report = await controller.install_launch_agent()
        result = await controller.status()
    """

    def __init__(
        self,
        config: AgentctlConfig,
        release_only: bool | None = None,
        runner: CommandRunner | None = None,
        installer: DescriptorInstaller | None = None,
    ):
        """Initialize the controller.

        Args:
            config: Loaded configuration.
            release_only: Override the config's release_only flag.
            runner: Command runner, for injecting a fake in tests.
            installer: Descriptor installer to use.
        """
        self._config = config
        self.release_only = (
            config.release_only if release_only is None else release_only
        )
        self._runner = runner
        self._installer = installer or DescriptorInstaller()

    @property
    def descriptor(self) -> ServiceDescriptor:
        """The descriptor this build expects, resolved from config."""
        return resolve_descriptor(self._config.agent, self.release_only)

    def client(self) -> ServiceControlClient:
        return ServiceControlClient(
            self.descriptor, self._config.launchctl, runner=self._runner
        )

    async def load(self) -> ExecutionResult:
        return await self.client().load()

    async def unload(self) -> ExecutionResult:
        return await self.client().unload()

    async def reload(self) -> ExecutionResult:
        return await self.client().reload()

    async def status(self) -> ExecutionResult:
        return await self.client().status()

    async def install_launch_agent(self) -> InstallReport:
        """Make sure the current descriptor is installed and the agent runs.

        Reloads only when the descriptor was rewritten, and loads only when
        the agent is not running, so calling this on every launch does not
        restart an agent that is already current.
        """
        client = self.client()
        descriptor = client.descriptor

        try:
            installed = self._installer.install(descriptor)
        except LaunchError as e:
            logger.error(f"Failed to install {descriptor.label}: {e.message}")
            return InstallReport(error=e)

        if installed:
            result = await client.reload()
            return InstallReport(installed=True, action="reloaded", error=result.error)

        status = await client.status()
        if status.error is not None:
            return InstallReport(error=status.error)

        if status.status is not None and status.status.kind != StatusKind.NOT_RUNNING:
            logger.debug(f"{descriptor.label} is current and running")
            return InstallReport()

        result = await client.load()
        return InstallReport(action="loaded", error=result.error)

    async def uninstall_launch_agent(self) -> ExecutionResult:
        """Unload the agent and delete its descriptor.

        The descriptor is only removed if unload succeeded.
        """
        client = self.client()
        result = await client.unload()
        if result.error is not None:
            return result

        try:
            self._installer.remove(client.descriptor)
        except LaunchError as e:
            result.error = e
        return result
