from __future__ import annotations

import logging
import shutil
import subprocess
import threading
from collections.abc import Callable, Generator
from typing import Union

import pytest

from dockrun import CommandOutcome, Runtime

# TEST CONSTANTS
CONTAINER_ID = "3f2a9c1be07d"
DOCKER_EXE = shutil.which("docker")

Scripted = Union[CommandOutcome, Callable[[], CommandOutcome]]


def ok(output: str = "") -> CommandOutcome:
    """Outcome of a runtime call that exited 0."""
    return CommandOutcome(output, 0)


def failed(output: str = "", code: int = 1) -> CommandOutcome:
    """Outcome of a runtime call that exited non-zero."""
    return CommandOutcome(output, code, subprocess.CalledProcessError(code, ["docker"], output))


class FakeRuntime(Runtime):
    """Runtime that replays scripted outcomes per verb and records every call.

    A scripted item may be a callable, which is invoked when the call happens;
    it can block or deliver signals to simulate a container that is still running.
    Verbs without a script answer ``ok("")``.
    """

    def __init__(self, **scripts: list[Scripted]):
        super().__init__("docker")
        self._exe = "docker"
        self.scripts = {verb: list(items) for verb, items in scripts.items()}
        self.calls: list[tuple[str, ...]] = []
        self._lock = threading.Lock()

    def _run(self, *args: str) -> CommandOutcome:
        with self._lock:
            self.calls.append(args)
            script = self.scripts.get(args[0], [])
            item: Scripted = script.pop(0) if script else ok()
        return item() if callable(item) else item

    def verbs(self) -> list[str]:
        return [call[0] for call in self.calls]

    def calls_for(self, verb: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == verb]


@pytest.fixture
def container_id() -> str:
    return CONTAINER_ID


@pytest.fixture(scope="session")
def docker_exe() -> str:
    if not DOCKER_EXE:
        pytest.skip("'docker' executable not found in PATH")
    return DOCKER_EXE


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to captured streams between tests."""
    yield
    logger = logging.getLogger("dockrun")
    logger.handlers = []
    logger.propagate = True
