"""CLI command modules."""

from agentctl.cli.commands import service

__all__ = ["service"]
