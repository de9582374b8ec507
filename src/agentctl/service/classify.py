"""Classify launchctl output.

Everything here is a pure function of the command's exit code and text, so
the rules can be tested without spawning launchctl.
"""

import re
from enum import Enum

from agentctl.service.errors import ErrorKind, LaunchError
from agentctl.service.types import ServiceStatus, StatusKind


class Operation(Enum):
    LOAD = "load"
    UNLOAD = "unload"
    STATUS = "status"


# launchctl reports repeated loads/unloads as errors (sometimes with exit 0)
ALREADY_LOADED_PATTERNS = [
    re.compile(r"already loaded", re.IGNORECASE),
    re.compile(r"service already bootstrapped", re.IGNORECASE),
    re.compile(r"operation already in progress", re.IGNORECASE),
]

NOT_LOADED_PATTERNS = [
    re.compile(r"could not find specified service", re.IGNORECASE),
    re.compile(r"could not find service", re.IGNORECASE),
    re.compile(r"no such process", re.IGNORECASE),
    re.compile(r"not loaded", re.IGNORECASE),
]

PERMISSION_PATTERNS = [
    re.compile(r"operation not permitted", re.IGNORECASE),
    re.compile(r"permission denied", re.IGNORECASE),
]

NOT_FOUND_PATTERNS = [
    re.compile(r"no such file or directory", re.IGNORECASE),
]

# macOS 11+ answers `bootstrap` of a registered label with a generic EIO
BOOTSTRAP_EIO_PATTERN = re.compile(r"bootstrap failed: 5:", re.IGNORECASE)


def is_ambiguous_bootstrap_failure(output: str) -> bool:
    """True if a bootstrap failure may just mean the label is already loaded."""
    return _first_match([BOOTSTRAP_EIO_PATTERN], output) is not None

_BENIGN = {
    Operation.LOAD: ALREADY_LOADED_PATTERNS,
    Operation.UNLOAD: NOT_LOADED_PATTERNS,
    # `launchctl list <label>` exits 113 for labels it does not know
    Operation.STATUS: NOT_LOADED_PATTERNS,
}

_PID_DICT = re.compile(r'"PID"\s*=\s*(-?\d+)\s*;')
_EXIT_DICT = re.compile(r'"LastExitStatus"\s*=\s*(-?\d+)\s*;')


def _first_match(patterns: list[re.Pattern[str]], text: str) -> str | None:
    for pattern in patterns:
        if match := pattern.search(text):
            # Report the whole line the pattern matched in
            start = text.rfind("\n", 0, match.start()) + 1
            end = text.find("\n", match.end())
            return text[start : end if end != -1 else len(text)].strip()
    return None


def classify_output(
    operation: Operation, returncode: int, output: str
) -> tuple[LaunchError | None, str | None]:
    """Classify a finished launchctl command.

    Args:
        operation: Which lifecycle operation ran.
        returncode: Process exit code.
        output: Combined stdout/stderr.

    Returns:
        Tuple of (error, warning). Benign idempotency responses yield no error
        and the matching line as the warning.
    """
    if warning := _first_match(_BENIGN[operation], output):
        return None, warning

    if returncode == 0:
        return None, None

    text = output.strip() or f"exit status {returncode}"
    if _first_match(PERMISSION_PATTERNS, output):
        kind = ErrorKind.PERMISSION_DENIED
    elif _first_match(NOT_FOUND_PATTERNS, output):
        kind = ErrorKind.NOT_FOUND
    else:
        kind = ErrorKind.EXTERNAL_COMMAND_FAILURE

    return (
        LaunchError(kind, f"launchctl {operation.value} failed: {text}", output),
        None,
    )


def _parse_tabular(label: str, output: str) -> tuple[bool, int | None, int | None]:
    # `launchctl list` format: PID\tStatus\tLabel, with "-" for no PID
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != 3 or parts[2] != label:
            continue
        pid = int(parts[0]) if parts[0].lstrip("-").isdigit() else None
        status = int(parts[1]) if parts[1].lstrip("-").isdigit() else None
        return True, pid, status
    return False, None, None


def parse_status(label: str, returncode: int, output: str) -> ServiceStatus:
    """Parse `launchctl list <label>` output into a ServiceStatus.

    Accepts both the dictionary form printed for a single label and the
    tabular form printed by a bare `launchctl list`.
    """
    loaded = False
    pid: int | None = None
    last_exit: int | None = None

    if returncode == 0 and "{" in output:
        loaded = True
        if match := _PID_DICT.search(output):
            pid = int(match.group(1))
        if match := _EXIT_DICT.search(output):
            last_exit = int(match.group(1))
    elif returncode == 0:
        loaded, pid, last_exit = _parse_tabular(label, output)

    if pid is not None and pid <= 0:
        pid = None

    if not loaded:
        kind = StatusKind.NOT_RUNNING
    elif last_exit not in (None, 0):
        kind = StatusKind.RUNNING_WITH_ERRORS
    elif pid is not None:
        kind = StatusKind.RUNNING
    else:
        kind = StatusKind.NOT_RUNNING

    return ServiceStatus(kind=kind, loaded=loaded, pid=pid, last_exit_status=last_exit)
