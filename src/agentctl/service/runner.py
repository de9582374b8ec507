"""Run external commands asynchronously with a bounded timeout."""

import asyncio
import contextlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from agentctl.service.errors import ErrorKind, LaunchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    """Exit code and combined stdout/stderr of a finished command."""

    argv: tuple[str, ...]
    returncode: int
    output: str


class CommandRunner(Protocol):
    """Callable that executes an argv and returns its output.

    Implementations raise LaunchError for failures that prevent the command
    from producing an exit code (missing executable, timeout).
    """

    async def __call__(self, argv: Sequence[str], timeout: float) -> CommandOutput:
        ...


async def run_command(argv: Sequence[str], timeout: float) -> CommandOutput:
    """Run a command, capturing stdout and stderr together.

    Args:
        argv: Command and arguments.
        timeout: Seconds to wait before killing the process.

    Returns:
        CommandOutput with the exit code and decoded output.

    Raises:
        LaunchError: NOT_FOUND if the executable is missing, PERMISSION_DENIED
            if it cannot be executed, TIMEOUT if it did not finish in time.
    """
    argv = tuple(argv)
    logger.debug(f"Running {' '.join(argv)}")
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError as e:
        raise LaunchError(ErrorKind.NOT_FOUND, f"Command not found: {argv[0]}") from e
    except PermissionError as e:
        raise LaunchError(
            ErrorKind.PERMISSION_DENIED, f"Permission denied executing {argv[0]}"
        ) from e

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError as e:
        logger.warning(f"Command timed out after {timeout}s: {' '.join(argv)}")
        raise LaunchError(
            ErrorKind.TIMEOUT, f"{argv[0]} timed out after {timeout} seconds"
        ) from e
    finally:
        # Reap the child on timeout and on cancellation
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()

    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    return CommandOutput(argv=argv, returncode=proc.returncode or 0, output=output)
