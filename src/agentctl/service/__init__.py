"""Launch agent lifecycle management.

Installs the agent's launchd descriptor, keeps it in sync with the bundled
version, and drives launchctl:
- resolver: expected descriptor for the build mode
- installer: on-disk reconciliation
- client: load, unload, reload and status
- controller: the install-and-run composite

Example:
    from agentctl.service import LaunchController

    controller = LaunchController(config, release_only=True)
    report = await controller.install_launch_agent()
    result = await controller.status()
"""

from agentctl.service.callbacks import LaunchCtl
from agentctl.service.client import ServiceControlClient
from agentctl.service.controller import LaunchController
from agentctl.service.errors import ErrorKind, LaunchError, ReloadError
from agentctl.service.installer import DescriptorInstaller
from agentctl.service.resolver import resolve_descriptor
from agentctl.service.types import (
    ExecutionResult,
    InstallReport,
    InstallState,
    ServiceDescriptor,
    ServiceMode,
    ServiceStatus,
    StatusKind,
)

__all__ = [
    "DescriptorInstaller",
    "ErrorKind",
    "ExecutionResult",
    "InstallReport",
    "InstallState",
    "LaunchController",
    "LaunchCtl",
    "LaunchError",
    "ReloadError",
    "ServiceControlClient",
    "ServiceDescriptor",
    "ServiceMode",
    "ServiceStatus",
    "StatusKind",
    "resolve_descriptor",
]
