# tests/unit/test_helpers.py
from __future__ import annotations

from unittest.mock import patch

import pytest

from dockrun.helpers import get_runtime_exe


def test_get_runtime_exe_found() -> None:
    """Test when docker is in PATH."""
    with patch("shutil.which", return_value="/usr/bin/docker"):
        assert get_runtime_exe() == "/usr/bin/docker"


def test_get_runtime_exe_other_runtime() -> None:
    with patch("shutil.which", return_value="/usr/bin/podman") as which_mock:
        assert get_runtime_exe("podman") == "/usr/bin/podman"
    which_mock.assert_called_once_with("podman")


def test_get_runtime_exe_not_found() -> None:
    """Test when docker is NOT in PATH."""
    with patch("shutil.which", return_value=None):
        with pytest.raises(RuntimeError, match="docker not found in PATH"):
            get_runtime_exe()
