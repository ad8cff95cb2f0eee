from __future__ import annotations

import logging
import signal
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any

__all__ = ["RELAYED_SIGNALS", "SignalSource", "verb_for_signal"]

logger = logging.getLogger(__name__)

RELAYED_SIGNALS: tuple[signal.Signals, ...] = (
    signal.SIGINT,
    signal.SIGTERM,
    signal.SIGHUP,
    signal.SIGQUIT,
)

# SIGKILL cannot be caught, SIGQUIT stands in as the forceful request.
_SIGNAL_VERBS: dict[signal.Signals, str] = {
    signal.SIGINT: "stop",
    signal.SIGQUIT: "kill",
}


def verb_for_signal(sig: signal.Signals) -> str:
    """Map a host signal to the runtime control verb; unmapped signals stop gracefully."""
    return _SIGNAL_VERBS.get(sig, "stop")


class SignalSource:
    """Host termination signals as an event source with a bounded backlog.

    While subscribed, each relayed signal is handed to the sink instead of
    terminating the process. At most ``maxsize`` signals may be pending
    (delivered but not yet acknowledged); further ones are dropped until the
    consumer calls :meth:`ack`.
    """

    def __init__(self, signals: Iterable[signal.Signals] = RELAYED_SIGNALS, maxsize: int = 1):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.signals = tuple(signals)
        self.maxsize = maxsize
        self._sink: Callable[[signal.Signals], None] | None = None
        self._pending = 0
        self.dropped = 0

    @property
    def subscribed(self) -> bool:
        return self._sink is not None

    @contextmanager
    def subscribe(self, sink: Callable[[signal.Signals], None]) -> Iterator[SignalSource]:
        """Install handlers feeding ``sink``; previous handlers are restored on exit."""
        if self._sink is not None:
            raise RuntimeError("SignalSource is already subscribed")

        previous: dict[signal.Signals, Any] = {}
        self._sink = sink
        self._pending = 0
        try:
            for sig in self.signals:
                previous[sig] = signal.signal(sig, self._handle)
            logger.debug("Relaying signals: %s", ", ".join(s.name for s in self.signals))
            yield self
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
            self._sink = None
            logger.debug("Signal handlers restored")

    def _handle(self, signum: int, _frame: object) -> None:
        self.deliver(signum)

    def deliver(self, signum: int) -> bool:
        """Queue a signal for the subscriber; returns False when it was dropped."""
        sink = self._sink
        if sink is None or self._pending >= self.maxsize:
            self.dropped += 1
            return False
        self._pending += 1
        sink(signal.Signals(signum))
        return True

    def ack(self) -> None:
        """Release the slot of a serviced signal."""
        if self._pending > 0:
            self._pending -= 1
