"""Error taxonomy for launch agent operations."""

from enum import Enum


class ErrorKind(Enum):
    """Classification of a failed operation."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    EXTERNAL_COMMAND_FAILURE = "external_command_failure"
    TIMEOUT = "timeout"
    IO_ERROR = "io_error"
    # Only used internally; a corrupt descriptor is overwritten, never reported.
    CORRUPT_DESCRIPTOR = "corrupt_descriptor"


class LaunchError(Exception):
    """A launch agent operation failed.

    Attributes:
        kind: Error classification.
        output: Captured command output, if any, for diagnostics.
    """

    def __init__(self, kind: ErrorKind, message: str, output: str = ""):
        super().__init__(message)
        self.kind = kind
        self.output = output

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def __repr__(self) -> str:
        return f"LaunchError({self.kind.value}, {self.message!r})"


class ReloadError(LaunchError):
    """A reload that did not complete cleanly.

    ``unload_error`` is set when unload failed with a non-benign error and
    load was forced through anyway. ``load_error`` is set when the load step
    itself failed.
    """

    def __init__(
        self,
        unload_error: LaunchError | None,
        load_error: LaunchError | None,
        output: str = "",
    ):
        parts = []
        if unload_error is not None:
            parts.append(f"unload failed: {unload_error.message}")
        if load_error is not None:
            parts.append(f"load failed: {load_error.message}")
        source = load_error or unload_error
        kind = source.kind if source else ErrorKind.EXTERNAL_COMMAND_FAILURE
        super().__init__(kind, "; ".join(parts) or "reload failed", output)
        self.unload_error = unload_error
        self.load_error = load_error

    @property
    def forced(self) -> bool:
        """True if load succeeded after a failed unload."""
        return self.unload_error is not None and self.load_error is None
