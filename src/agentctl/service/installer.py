"""Install and reconcile the launch agent descriptor on disk.

The installer only manages the descriptor file. Whether the agent is loaded
in launchd is the control client's concern, so install can be exercised as a
plain file operation.
"""

import logging
import os
import tempfile
from pathlib import Path

from agentctl.service.errors import ErrorKind, LaunchError
from agentctl.service.plist import compare_versions, dump_descriptor, parse_descriptor
from agentctl.service.types import InstallState, ServiceDescriptor

logger = logging.getLogger(__name__)


def _os_error(action: str, path: Path, error: OSError) -> LaunchError:
    if isinstance(error, PermissionError):
        return LaunchError(
            ErrorKind.PERMISSION_DENIED, f"Permission denied {action} {path}"
        )
    return LaunchError(ErrorKind.IO_ERROR, f"Error {action} {path}: {error}")


def _write_atomic(path: Path, data: bytes) -> None:
    """Write bytes atomically via tempfile + fsync + os.replace()."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, 0o644)
        Path(tmp).replace(path)
    except BaseException:
        try:
            Path(tmp).unlink()
        except OSError:
            pass
        raise


class DescriptorInstaller:
    """Keeps the on-disk descriptor in line with the expected one."""

    def inspect(self, expected: ServiceDescriptor) -> InstallState:
        """Compare the on-disk descriptor against the expected one.

        A missing file is NOT_INSTALLED. A corrupt file, a file without a
        version token, or one registered under another label is stale.

        Raises:
            LaunchError: If the file exists but cannot be read.
        """
        path = expected.descriptor_path
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return InstallState.NOT_INSTALLED
        except OSError as e:
            raise _os_error("reading", path, e) from e

        try:
            installed = parse_descriptor(data)
        except LaunchError as e:
            logger.warning(f"Replacing corrupt descriptor {path}: {e.message}")
            return InstallState.INSTALLED_STALE

        if installed.label != expected.label:
            logger.debug(
                f"Descriptor {path} has label {installed.label!r}, "
                f"expected {expected.label!r}"
            )
            return InstallState.INSTALLED_STALE

        if installed.version is None:
            return InstallState.INSTALLED_STALE

        if compare_versions(installed.version, expected.version) < 0:
            return InstallState.INSTALLED_STALE

        return InstallState.INSTALLED_CURRENT

    def install(self, expected: ServiceDescriptor) -> bool:
        """Write the expected descriptor if it is missing or stale.

        Returns:
            True if the descriptor was written, False if it was already current.

        Raises:
            LaunchError: PERMISSION_DENIED or IO_ERROR if the file could not be
                read or written. Not retried.
        """
        state = self.inspect(expected)
        if state == InstallState.INSTALLED_CURRENT:
            logger.debug(f"Descriptor {expected.descriptor_path} is current")
            return False

        path = expected.descriptor_path
        try:
            _write_atomic(path, dump_descriptor(expected))
        except OSError as e:
            raise _os_error("writing", path, e) from e

        logger.info(
            f"Installed descriptor {path} (version {expected.version}, "
            f"{state.value})"
        )
        return True

    def remove(self, descriptor: ServiceDescriptor) -> bool:
        """Delete the descriptor file.

        Returns:
            True if a file was removed, False if none existed.

        Raises:
            LaunchError: If the file exists but could not be removed.
        """
        path = descriptor.descriptor_path
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise _os_error("removing", path, e) from e

        logger.info(f"Removed descriptor {path}")
        return True
