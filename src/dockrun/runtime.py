from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass

from .helpers import get_runtime_exe

__all__ = ["ERROR_MARKER", "MISSING_MARKER", "CommandOutcome", "Runtime", "Verdict"]

logger = logging.getLogger(__name__)

# The runtime CLI may exit 0 even when the operation failed, so its output is
# also checked for these markers.
ERROR_MARKER = "Error"
MISSING_MARKER = "No such container"

# Exit status reported when the runtime process could not be run at all.
UNKNOWN_EXIT_CODE = 127


class Verdict(enum.Enum):
    OK = "ok"
    FAILED = "failed"
    SUSPECT = "suspect"  # exit status 0, but the output reports an error


@dataclass(frozen=True)
class CommandOutcome:
    """Combined output and exit status of one runtime invocation."""

    output: str
    exit_code: int
    error: Exception | None = None

    def verdict(self, marker: str = ERROR_MARKER) -> Verdict:
        """Classify the outcome, trusting the exit status first and the output second."""
        if self.error is not None:
            return Verdict.FAILED
        if marker in self.output:
            return Verdict.SUSPECT
        return Verdict.OK

    def failed(self, marker: str = ERROR_MARKER) -> bool:
        verdict = self.verdict(marker)
        if verdict is Verdict.SUSPECT:
            logger.warning("runtime exited 0 but reported %r: %s", marker, self.output.strip())
        return verdict is not Verdict.OK


class Runtime:
    """Thin wrapper over the container runtime CLI.

    Every call blocks until the runtime exits and returns a
    :class:`CommandOutcome`; failures are never raised.
    """

    def __init__(self, runtime: str = "docker"):
        self.runtime = runtime
        self._exe: str | None = None

    # --------------------------------------------------------------------- #
    # Runtime executable
    # --------------------------------------------------------------------- #
    def _get_runtime(self) -> str:
        if self._exe is None:
            self._exe = get_runtime_exe(self.runtime)
        return self._exe

    def _run(self, *args: str) -> CommandOutcome:
        cmd = [self._get_runtime(), *args]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug("Could not run %s: %s", cmd[0], e)
            return CommandOutcome("", UNKNOWN_EXIT_CODE, e)

        error = None
        if result.returncode != 0:
            error = subprocess.CalledProcessError(result.returncode, cmd, output=result.stdout)
        logger.debug("%s exited with %d", args[0], result.returncode)
        return CommandOutcome(result.stdout or "", result.returncode, error)

    # --------------------------------------------------------------------- #
    # Verbs
    # --------------------------------------------------------------------- #
    def run_detached(self, args: list[str]) -> CommandOutcome:
        """Create and start a container in the background."""
        return self._run("run", "-d", *args)

    def wait(self, container_id: str) -> CommandOutcome:
        """Block until the container exits; its exit code is the output."""
        return self._run("wait", container_id)

    def logs(self, container_id: str) -> CommandOutcome:
        return self._run("logs", container_id)

    def remove(self, container_id: str) -> CommandOutcome:
        return self._run("rm", container_id)

    def control(self, verb: str, container_id: str) -> CommandOutcome:
        """Send ``stop`` or ``kill`` to the container."""
        if verb not in ("stop", "kill"):
            raise ValueError(f"Unsupported control verb: {verb!r}")
        return self._run(verb, container_id)

    def __repr__(self) -> str:
        return f"<Runtime {self.runtime} exe={self._exe}>"
