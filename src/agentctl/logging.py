"""Centralized logging configuration for agentctl.

All entry points should call configure_logging() early.

Logging Levels:
- DEBUG: launchctl argv, benign idempotency responses
- INFO: descriptor writes, loads and unloads
- WARNING: failed launchctl commands, corrupt descriptors, timeouts
- ERROR: failures that abort a composite operation
"""

import logging
import os

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - agentctl.service.client -> service
    - agentctl.config.loader -> config
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "agentctl":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return super().format(record)


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
) -> None:
    """Configure logging for agentctl.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses AGENTCTL_LOG_LEVEL env var or WARNING.
        use_rich: Use Rich handler for colorful output.
    """
    if level is None:
        level = os.environ.get("AGENTCTL_LOG_LEVEL", "WARNING").upper()
    level = level.upper()
    if level not in LEVELS:
        level = "WARNING"

    log_level = getattr(logging, level)

    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )
