"""Value types shared by the resolver, installer and control client."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from agentctl.service.errors import LaunchError


class ServiceMode(Enum):
    """Build mode selecting which agent variant is installed."""

    RELEASE = "release"
    DEVELOPMENT = "development"


class InstallState(Enum):
    """State of the on-disk descriptor relative to the expected one."""

    NOT_INSTALLED = "not_installed"
    INSTALLED_CURRENT = "installed_current"
    INSTALLED_STALE = "installed_stale"


class StatusKind(Enum):
    """Runtime state of the agent as reported by launchctl."""

    NOT_RUNNING = "not_running"
    RUNNING = "running"
    RUNNING_WITH_ERRORS = "running_with_errors"


@dataclass(frozen=True)
class ServiceDescriptor:
    """Identity and launch parameters of a launch agent."""

    label: str
    descriptor_path: Path
    executable_path: Path
    version: str
    mode: ServiceMode
    arguments: tuple[str, ...] = ()
    environment: tuple[tuple[str, str], ...] = ()
    run_at_load: bool = True
    keep_alive: bool = True
    stdout_path: Path | None = None
    stderr_path: Path | None = None

    @property
    def program_arguments(self) -> list[str]:
        """Full argv launchd should execute."""
        return [str(self.executable_path), *self.arguments]


@dataclass
class ServiceStatus:
    """Parsed result of a status query."""

    kind: StatusKind
    loaded: bool = False
    pid: int | None = None
    last_exit_status: int | None = None


@dataclass
class ExecutionResult:
    """Outcome of a single launchctl invocation.

    ``output`` is always populated with whatever the command printed, even
    on failure. ``warning`` carries a benign idempotency response (for
    example "already loaded") that was treated as success.
    """

    output: str = ""
    error: LaunchError | None = None
    warning: str | None = None
    status: ServiceStatus | None = None
    argv: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class InstallReport:
    """Outcome of the composite install operation."""

    installed: bool = False
    action: Literal["reloaded", "loaded", "none"] = "none"
    error: LaunchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
