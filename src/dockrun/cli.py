from __future__ import annotations

import logging
import sys

from .config import RunnerConfig, configure_logging
from .core import Coordinator
from .errors import DockrunError, UsageError
from .preflight import run_preflight_checks
from .runtime import Runtime

logger = logging.getLogger(__name__)

USAGE = "dockrun [OPTIONS] IMAGE [COMMAND]\n\nOPTIONS - same options as docker run, without -a & -i"

# Flags that need an attached terminal or stdin.
UNSUPPORTED_FLAGS = ("-i", "-a")


def validate_args(args: list[str]) -> None:
    """Reject argument vectors the detached run cannot honour."""
    problems: list[str] = []
    if not args:
        problems.append(USAGE)
    for flag in UNSUPPORTED_FLAGS:
        if flag in args:
            problems.append(f"ERROR: dockrun doesn't support {flag}")
    if problems:
        raise UsageError("\n".join(problems))


# --------------------------------------------------------------------------- #
# Pretty failure printer
# --------------------------------------------------------------------------- #
def _fail(msg: str) -> None:
    header = "=" * 70
    print(f"\n{header}\n[ERROR] {msg}\n{header}\n", file=sys.stderr)  # noqa: T201


def main(argv: list[str] | None = None, config: RunnerConfig | None = None) -> int:
    """Entry point: returns the exit status for the process."""
    args = sys.argv[1:] if argv is None else argv
    config = config or RunnerConfig.from_env()
    configure_logging(config.level)

    try:
        validate_args(args)
        run_preflight_checks(config)
        coordinator = Coordinator(Runtime(config.runtime))
        logger.info("dockrun starting: %s", " ".join(args))
        return coordinator.run(args)
    except UsageError as e:
        print(e, file=sys.stderr)  # noqa: T201
        return e.exit_status
    except DockrunError as e:
        _fail(str(e))
        return e.exit_status
