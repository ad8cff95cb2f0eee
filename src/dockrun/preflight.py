from __future__ import annotations

import logging
import os
from collections.abc import Callable

from .config import RunnerConfig
from .errors import PreflightError
from .helpers import get_runtime_exe

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Individual checks
# --------------------------------------------------------------------------- #
def _check_runtime_in_path(config: RunnerConfig) -> None:
    try:
        get_runtime_exe(config.runtime)
    except RuntimeError as e:
        raise PreflightError(
            f"'{config.runtime}' not found in PATH\n"
            "Install: https://docs.docker.com/get-docker/\n"
            "Or point DOCKRUN_RUNTIME at a compatible CLI"
        ) from e


def _check_runtime_executable(config: RunnerConfig) -> None:
    exe = get_runtime_exe(config.runtime)
    if not os.access(exe, os.X_OK):
        raise PreflightError(f"Runtime is not executable: {exe}\nFix: chmod +x {exe}")


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
CHECKS: list[Callable[[RunnerConfig], None]] = [
    _check_runtime_in_path,
    _check_runtime_executable,
]


def run_preflight_checks(
    config: RunnerConfig, custom_checks: list[Callable[[RunnerConfig], None]] | None = None
) -> None:
    """Runtime environment checks run before the container is launched."""
    all_checks = CHECKS + (custom_checks or [])
    for check in all_checks:
        logger.debug("Preflight: %s", check.__name__)
        check(config)
