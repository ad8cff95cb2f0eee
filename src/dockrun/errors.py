from __future__ import annotations

__all__ = ["DockrunError", "LaunchError", "PreflightError", "UsageError", "WaitError"]


class DockrunError(RuntimeError):
    """Base class for failures that end the run before a container exit code is known."""

    exit_status = 1


class UsageError(DockrunError):
    """Invalid or missing command line arguments."""


class PreflightError(DockrunError):
    """The runtime environment is not usable."""


class LaunchError(DockrunError):
    """The container could not be created or returned a malformed ID."""


class WaitError(DockrunError):
    """The container exit code could not be retrieved."""
