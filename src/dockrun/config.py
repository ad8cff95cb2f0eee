from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

__all__ = ["RunnerConfig", "configure_logging"]

ENV_RUNTIME = "DOCKRUN_RUNTIME"
ENV_LOG_LEVEL = "DOCKRUN_LOG_LEVEL"

DEFAULT_RUNTIME = "docker"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class RunnerConfig:
    """Settings for one ``dockrun`` invocation.

    - ``runtime`` → name or path of the runtime CLI, resolved on ``PATH``
    - ``log_level`` → level of the ``dockrun`` diagnostic logger
    """

    runtime: str = DEFAULT_RUNTIME
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RunnerConfig:
        """Build a config from ``DOCKRUN_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            runtime=env.get(ENV_RUNTIME) or DEFAULT_RUNTIME,
            log_level=(env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
        )

    @property
    def level(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: int) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    logger = logging.getLogger("dockrun")
    logger.setLevel(level)
    logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
