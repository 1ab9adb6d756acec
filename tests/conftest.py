# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""Global test fixtures for DriverKit.

Isolates the DRIVERKIT_* environment per test and provides helpers for
spawning the stub driver.
"""

from __future__ import annotations

import logging
import socket
from pathlib import Path

import pytest

from driverkit.supervisor.shutdown import ShutdownRegistry

STUB_DRIVER = Path(__file__).resolve().parent / "helpers" / "stub_driver.py"

_DRIVERKIT_ENV_VARS = (
    "DRIVERKIT_HOST",
    "DRIVERKIT_PORT",
    "DRIVERKIT_NODE_PATH",
    "DRIVERKIT_DRIVER_PATH",
    "DRIVERKIT_START_TIMEOUT",
    "DRIVERKIT_WORKDIR",
    "DRIVERKIT_LOG_PATH",
    "DRIVERKIT_CONFIG",
    "DRIVERKIT_LOG_LEVEL",
)


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point DRIVERKIT_DATA_DIR at a temp dir and drop any DRIVERKIT_* vars."""
    for var in _DRIVERKIT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    data_dir = tmp_path / "data"
    monkeypatch.setenv("DRIVERKIT_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Restore the root logger after tests that call setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def registry() -> ShutdownRegistry:
    """A private shutdown registry so tests never touch the process-wide one."""
    return ShutdownRegistry()


@pytest.fixture
def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def stub_driver() -> Path:
    return STUB_DRIVER
