"""Launchd property list encoding and version tokens.

The descriptor version is not a native launchd key, so it is carried in the
agent's environment as AGENTCTL_DESCRIPTOR_VERSION. launchd passes it through
to the agent untouched.
"""

import plistlib
import re
from dataclasses import dataclass
from typing import Any

from agentctl.service.errors import ErrorKind, LaunchError
from agentctl.service.types import ServiceDescriptor

VERSION_ENV_KEY = "AGENTCTL_DESCRIPTOR_VERSION"
MODE_ENV_KEY = "AGENTCTL_MODE"

_VERSION_SPLIT = re.compile(r"[.\-+]")


@dataclass
class InstalledDescriptor:
    """The fields of an on-disk descriptor that reconciliation looks at."""

    label: str | None
    version: str | None


def build_plist(descriptor: ServiceDescriptor) -> dict[str, Any]:
    """Build the launchd dictionary for a descriptor."""
    environment = dict(descriptor.environment)
    environment[VERSION_ENV_KEY] = descriptor.version
    environment[MODE_ENV_KEY] = descriptor.mode.value

    plist: dict[str, Any] = {
        "Label": descriptor.label,
        "ProgramArguments": descriptor.program_arguments,
        "EnvironmentVariables": environment,
        "RunAtLoad": descriptor.run_at_load,
        "KeepAlive": descriptor.keep_alive,
    }
    if descriptor.stdout_path is not None:
        plist["StandardOutPath"] = str(descriptor.stdout_path)
    if descriptor.stderr_path is not None:
        plist["StandardErrorPath"] = str(descriptor.stderr_path)
    return plist


def dump_descriptor(descriptor: ServiceDescriptor) -> bytes:
    """Serialize a descriptor as an XML property list."""
    return plistlib.dumps(build_plist(descriptor), sort_keys=True)


def parse_descriptor(data: bytes) -> InstalledDescriptor:
    """Parse an on-disk descriptor.

    Raises:
        LaunchError: With kind CORRUPT_DESCRIPTOR if the data is not a
            property list dictionary.
    """
    try:
        plist = plistlib.loads(data)
    except Exception as e:
        # plistlib surfaces malformed input as many exception types
        raise LaunchError(
            ErrorKind.CORRUPT_DESCRIPTOR, f"Unparseable descriptor: {e}"
        ) from e

    if not isinstance(plist, dict):
        raise LaunchError(
            ErrorKind.CORRUPT_DESCRIPTOR, "Descriptor is not a dictionary"
        )

    label = plist.get("Label")
    environment = plist.get("EnvironmentVariables")
    version = None
    if isinstance(environment, dict):
        version = environment.get(VERSION_ENV_KEY)

    return InstalledDescriptor(
        label=label if isinstance(label, str) else None,
        version=version if isinstance(version, str) and version else None,
    )


def _version_key(version: str) -> list[tuple[int, int, str]]:
    # Alphabetic parts sort before numeric ones at the same position, so
    # "1.0.rc1" < "1.0.1" and "1.9" < "1.10".
    key = []
    for part in _VERSION_SPLIT.split(version.strip()):
        if part.isdigit():
            key.append((1, int(part), ""))
        else:
            key.append((0, 0, part))
    return key


def compare_versions(left: str, right: str) -> int:
    """Compare two version tokens.

    Returns:
        Negative if left is older, zero if equal, positive if newer.
    """
    left_key = _version_key(left)
    right_key = _version_key(right)
    if left_key == right_key:
        return 0
    return -1 if left_key < right_key else 1
