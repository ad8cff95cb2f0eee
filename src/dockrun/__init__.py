from importlib.metadata import PackageNotFoundError, version

from .config import RunnerConfig
from .core import Coordinator
from .runtime import CommandOutcome, Runtime
from .signals import SignalSource

try:
    __version__ = version("dockrun")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "CommandOutcome",
    "Coordinator",
    "Runtime",
    "RunnerConfig",
    "SignalSource",
    "__version__",
]
