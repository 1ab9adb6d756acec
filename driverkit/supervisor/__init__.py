# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""
Driver process supervision package.

Spawns a WebDriver-compatible driver, captures its output and polls its
status endpoint until it is ready.
"""

from __future__ import annotations

from driverkit.supervisor.environment import build_environment
from driverkit.supervisor.health import POLL_INTERVAL, HealthPoller
from driverkit.supervisor.log_capture import BANNER_LINES, LogCapture
from driverkit.supervisor.manager import ProcessState, ProcessSupervisor
from driverkit.supervisor.shutdown import ShutdownRegistry, get_default_registry

__all__ = [
    "BANNER_LINES",
    "POLL_INTERVAL",
    "HealthPoller",
    "LogCapture",
    "ProcessState",
    "ProcessSupervisor",
    "ShutdownRegistry",
    "build_environment",
    "get_default_registry",
]
