"""agentctl - install, reconcile and control a per-user launchd agent."""

__version__ = "0.1.0"
