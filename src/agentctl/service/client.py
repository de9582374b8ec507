"""Lifecycle operations against launchctl for a single launch agent."""

import logging
import os

from agentctl.config.models import LaunchctlConfig
from agentctl.service.classify import (
    Operation,
    classify_output,
    is_ambiguous_bootstrap_failure,
    parse_status,
)
from agentctl.service.errors import ErrorKind, LaunchError, ReloadError
from agentctl.service.runner import CommandRunner, run_command
from agentctl.service.types import ExecutionResult, ServiceDescriptor

logger = logging.getLogger(__name__)


class ServiceControlClient:
    """Issues load, unload, reload and status for one descriptor.

    Each operation is one launchctl invocation (reload is two, in order, and
    an ambiguous bootstrap failure is followed by a status query) and
    reports through an ExecutionResult rather than raising. No state about
    launchd is kept between calls, and calls for the same label are not
    serialized; callers must not overlap operations on one label.
    """

    def __init__(
        self,
        descriptor: ServiceDescriptor,
        config: LaunchctlConfig | None = None,
        runner: CommandRunner | None = None,
    ):
        self._descriptor = descriptor
        self._config = config or LaunchctlConfig()
        self._runner: CommandRunner = runner or run_command

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._descriptor

    def _domain(self) -> str:
        return f"gui/{os.getuid()}"

    def argv(self, operation: Operation) -> tuple[str, ...]:
        """Build the launchctl argv for an operation."""
        launchctl = self._config.path
        path = str(self._descriptor.descriptor_path)
        label = self._descriptor.label

        if operation == Operation.STATUS:
            return (launchctl, "list", label)
        if self._config.style == "domain":
            if operation == Operation.LOAD:
                return (launchctl, "bootstrap", self._domain(), path)
            return (launchctl, "bootout", f"{self._domain()}/{label}")
        if operation == Operation.LOAD:
            return (launchctl, "load", "-w", path)
        if not self._descriptor.descriptor_path.exists():
            # unload needs the plist; without it fall back to removing by label
            return (launchctl, "remove", label)
        return (launchctl, "unload", "-w", path)

    async def _execute(self, operation: Operation) -> ExecutionResult:
        argv = self.argv(operation)
        try:
            result = await self._runner(argv, self._config.timeout)
        except LaunchError as e:
            logger.warning(f"launchctl {operation.value} failed: {e.message}")
            return ExecutionResult(output=e.output, error=e, argv=argv)

        error, warning = classify_output(operation, result.returncode, result.output)
        if error is not None:
            logger.warning(error.message)
        elif warning is not None:
            logger.debug(f"launchctl {operation.value}: {warning}")

        return ExecutionResult(
            output=result.output, error=error, warning=warning, argv=argv
        )

    async def load(self) -> ExecutionResult:
        """Register the descriptor with launchd and start the agent.

        Loading an already loaded agent succeeds with a warning.
        """
        path = self._descriptor.descriptor_path
        if not path.exists():
            error = LaunchError(ErrorKind.NOT_FOUND, f"Descriptor not found: {path}")
            return ExecutionResult(error=error, argv=self.argv(Operation.LOAD))

        result = await self._execute(Operation.LOAD)
        if (
            result.error is not None
            and self._config.style == "domain"
            and is_ambiguous_bootstrap_failure(result.output)
        ):
            status = await self.status()
            if status.status is not None and status.status.loaded:
                logger.debug(f"{self._descriptor.label} already bootstrapped")
                result.warning = result.output.strip()
                result.error = None
        if result.ok:
            logger.info(f"Loaded {self._descriptor.label}")
        return result

    async def unload(self) -> ExecutionResult:
        """Deregister the agent. Unloading an absent agent succeeds."""
        result = await self._execute(Operation.UNLOAD)
        if result.ok and result.warning is None:
            logger.info(f"Unloaded {self._descriptor.label}")
        return result

    async def reload(self) -> ExecutionResult:
        """Unload then load.

        Load always runs once unload has finished. A failed unload does not
        stop the load, but is reported through a ReloadError alongside the
        load outcome.
        """
        unloaded = await self.unload()
        loaded = await self.load()

        output = "".join(r.output for r in (unloaded, loaded))
        error: LaunchError | None = None
        if unloaded.error is not None:
            error = ReloadError(unloaded.error, loaded.error, output)
        elif loaded.error is not None:
            error = loaded.error

        return ExecutionResult(
            output=output,
            error=error,
            warning=loaded.warning or unloaded.warning,
            argv=loaded.argv,
        )

    async def status(self) -> ExecutionResult:
        """Query launchd for the agent's registration and PID."""
        result = await self._execute(Operation.STATUS)
        returncode = 0 if result.ok and result.warning is None else 1
        result.status = parse_status(self._descriptor.label, returncode, result.output)
        return result
