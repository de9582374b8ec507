"""Completion-callback interface over LaunchController.

For collaborators (settings panels, startup hooks) that want to fire an
operation and be told when it is done rather than awaiting it.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from agentctl.config.models import AgentctlConfig
from agentctl.service.controller import LaunchController
from agentctl.service.errors import ErrorKind, LaunchError
from agentctl.service.runner import CommandRunner
from agentctl.service.types import ExecutionResult, InstallReport

logger = logging.getLogger(__name__)

T = TypeVar("T")

ExecutionCompletion = Callable[[LaunchError | None, str], None]
InstallCompletion = Callable[[LaunchError | None], None]


def _as_launch_error(task: asyncio.Task) -> LaunchError | None:
    if task.cancelled():
        return LaunchError(ErrorKind.EXTERNAL_COMMAND_FAILURE, "Operation cancelled")
    exc = task.exception()
    if exc is None:
        return None
    if isinstance(exc, LaunchError):
        return exc
    logger.error("Launch operation raised unexpectedly", exc_info=exc)
    return LaunchError(ErrorKind.EXTERNAL_COMMAND_FAILURE, f"Unexpected error: {exc}")


def schedule(
    operation: Coroutine[Any, Any, T],
    on_done: Callable[[T | None, LaunchError | None], None],
) -> asyncio.Task:
    """Run an operation as a task and report its outcome exactly once.

    ``on_done`` runs on the event loop with either the result or an error,
    including when the task is cancelled or raises.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        operation.close()
        raise
    task = loop.create_task(operation)

    def _done(finished: asyncio.Task) -> None:
        error = _as_launch_error(finished)
        on_done(None if error is not None else finished.result(), error)

    task.add_done_callback(_done)
    return task


class LaunchCtl:
    """Launch agent operations reporting through completion callbacks.

    Must be used from within a running event loop; completions are delivered
    on that loop, not necessarily in the caller's frame.
    """

    def __init__(
        self,
        config: AgentctlConfig,
        release_only: bool | None = None,
        runner: CommandRunner | None = None,
    ):
        self._controller = LaunchController(
            config, release_only=release_only, runner=runner
        )

    @property
    def release_only(self) -> bool:
        return self._controller.release_only

    @release_only.setter
    def release_only(self, value: bool) -> None:
        self._controller.release_only = value

    @property
    def controller(self) -> LaunchController:
        return self._controller

    def _execute(
        self,
        operation: Coroutine[Any, Any, ExecutionResult],
        completion: ExecutionCompletion,
    ) -> asyncio.Task:
        def on_done(result: ExecutionResult | None, error: LaunchError | None):
            if result is None:
                completion(error, error.output if error else "")
            else:
                completion(result.error, result.output)

        return schedule(operation, on_done)

    def load(self, completion: ExecutionCompletion) -> asyncio.Task:
        return self._execute(self._controller.load(), completion)

    def unload(self, completion: ExecutionCompletion) -> asyncio.Task:
        return self._execute(self._controller.unload(), completion)

    def reload(self, completion: ExecutionCompletion) -> asyncio.Task:
        return self._execute(self._controller.reload(), completion)

    def status(self, completion: ExecutionCompletion) -> asyncio.Task:
        return self._execute(self._controller.status(), completion)

    def install_launch_agent(self, completion: InstallCompletion) -> asyncio.Task:
        def on_done(report: InstallReport | None, error: LaunchError | None):
            completion(error if report is None else report.error)

        return schedule(self._controller.install_launch_agent(), on_done)
