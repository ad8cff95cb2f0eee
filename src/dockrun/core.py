from __future__ import annotations

import logging
import queue
import re
import signal
import sys
import threading
from typing import Union

from .errors import LaunchError, WaitError
from .runtime import MISSING_MARKER, UNKNOWN_EXIT_CODE, CommandOutcome, Runtime, Verdict
from .signals import SignalSource, verb_for_signal

__all__ = ["Coordinator", "parse_exit_code"]

logger = logging.getLogger(__name__)

MIN_ID_LENGTH = 4

_EXIT_CODE_RE = re.compile(r"[+-]?[0-9]+")

Event = Union[CommandOutcome, signal.Signals]


def parse_exit_code(output: str) -> int:
    """Parse the base-10 exit code printed by ``wait``."""
    text = output.strip()
    if not _EXIT_CODE_RE.fullmatch(text):
        raise WaitError(f"{text}\nfailed to convert exit code to int")
    return int(text, 10)


class Coordinator:
    """Runs one container to completion with "docker run" attached semantics.

    The container is started detached, host termination signals are relayed
    to it as ``stop``/``kill`` while a background ``wait`` runs, then its
    logs are printed and it is removed. :meth:`run` returns the container's
    own exit code.
    """

    def __init__(self, runtime: Runtime, signals: SignalSource | None = None):
        """Initialize a coordinator for a single container."""
        self.runtime = runtime
        self.signals = signals if signals is not None else SignalSource()
        self.container_id: str | None = None

    @property
    def _name(self) -> str:
        return self.runtime.runtime

    # --------------------------------------------------------------------- #
    # Launcher
    # --------------------------------------------------------------------- #
    def launch(self, args: list[str]) -> str:
        """Start the container detached and return its ID."""
        if self.container_id is not None:
            raise RuntimeError(f"Container already launched: {self.container_id}")

        outcome = self.runtime.run_detached(args)
        verdict = outcome.verdict()
        if verdict is Verdict.FAILED:
            raise LaunchError(
                f"{self._name} run: {outcome.output}\n"
                f"{self._name} exited with exit code: {outcome.exit_code}"
            )
        if verdict is Verdict.SUSPECT:
            logger.warning("%s run exited 0 but reported an error: %s", self._name, outcome.output)

        container_id = outcome.output.strip("\n")
        if len(container_id) < MIN_ID_LENGTH:
            raise LaunchError(
                f"{self._name} container ID is too small, possibly invalid: {container_id!r}"
            )

        self.container_id = container_id
        logger.info("Started container %s", container_id)
        return container_id

    # --------------------------------------------------------------------- #
    # Signal relay and completion waiter
    # --------------------------------------------------------------------- #
    def relay(self, container_id: str, sig: signal.Signals) -> CommandOutcome:
        """Forward a host signal to the container; failures are reported, not raised."""
        verb = verb_for_signal(sig)
        print(f"Received signal: {sig.name}; cleaning up", file=sys.stderr)  # noqa: T201
        outcome = self.runtime.control(verb, container_id)
        if outcome.failed():
            print(f"stopping container via signal {sig.name} failed", file=sys.stderr)  # noqa: T201
            logger.debug("%s %s: %s %s", self._name, verb, outcome.output, outcome.error)
        return outcome

    def _start_waiter(
        self, container_id: str, events: queue.SimpleQueue[Event]
    ) -> threading.Thread:
        def wait() -> None:
            try:
                outcome = self.runtime.wait(container_id)
            except Exception as e:
                outcome = CommandOutcome("", UNKNOWN_EXIT_CODE, e)
            events.put(outcome)

        thread = threading.Thread(
            target=wait, name=f"dockrun-wait-{container_id[:12]}", daemon=True
        )
        thread.start()
        return thread

    def await_completion(
        self, container_id: str, events: queue.SimpleQueue[Event]
    ) -> CommandOutcome:
        """Service signals until the background wait posts its outcome."""
        while True:
            event = events.get()
            if isinstance(event, CommandOutcome):
                return event
            self.signals.ack()
            self.relay(container_id, event)

    def resolve_wait(self, container_id: str, outcome: CommandOutcome) -> CommandOutcome:
        """Retry ``wait`` once, synchronously, when the background wait errored."""
        if outcome.error is None:
            return outcome
        # A signal can make the wait lose the exit code it was about to report.
        logger.info("%s wait failed (%s), retrying once", self._name, outcome.error)
        return self.runtime.wait(container_id)

    def exit_code(self, container_id: str, outcome: CommandOutcome) -> int:
        """Turn the wait outcome into the container's exit code."""
        outcome = self.resolve_wait(container_id, outcome)
        if outcome.failed():
            raise WaitError(
                f"{self._name} wait: {outcome.output} {outcome.error}\n{self._name} wait failed"
            )
        return parse_exit_code(outcome.output)

    # --------------------------------------------------------------------- #
    # Logs and cleanup
    # --------------------------------------------------------------------- #
    def collect_logs(self, container_id: str) -> bool:
        """Print the container logs to stdout; returns False when they could not be fetched."""
        outcome = self.runtime.logs(container_id)
        if outcome.failed(MISSING_MARKER):
            print(  # noqa: T201
                f"ERROR: {self._name} logs: {outcome.output} {outcome.error}\n"
                f"ERROR: {self._name} logs failed",
                file=sys.stderr,
            )
            return False
        sys.stdout.write(outcome.output)
        sys.stdout.flush()
        return True

    def cleanup(self, container_id: str) -> bool:
        """Remove the container; returns False when removal failed."""
        outcome = self.runtime.remove(container_id)
        if outcome.failed():
            print(  # noqa: T201
                f"ERROR: {self._name} rm: {outcome.output} {outcome.error}\n"
                f"ERROR: {self._name} rm failed",
                file=sys.stderr,
            )
            return False
        logger.info("Removed container %s", container_id)
        return True

    # --------------------------------------------------------------------- #
    # Lifecycle
    # --------------------------------------------------------------------- #
    def run(self, args: list[str]) -> int:
        """Launch, wait, print logs, remove; return the container exit code."""
        container_id = self.launch(args)

        events: queue.SimpleQueue[Event] = queue.SimpleQueue()
        with self.signals.subscribe(events.put):
            self._start_waiter(container_id, events)
            outcome = self.await_completion(container_id, events)
            code = self.exit_code(container_id, outcome)
            logger.info("Container %s exited with %d", container_id, code)

            self.collect_logs(container_id)
            # The container's exit code wins over a failed cleanup.
            self.cleanup(container_id)
        return code

    def __repr__(self) -> str:
        """Return a string representation of the coordinator."""
        return f"<Coordinator {self._name} id={self.container_id}>"
