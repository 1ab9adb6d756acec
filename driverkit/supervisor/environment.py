# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""Environment construction for the driver child process."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping

from driverkit.paths import LAUNCHER_PATH

# Consumed by drivers that re-spawn the application through the launcher.
NODE_PATH_VAR = "SPECTRON_NODE_PATH"
LAUNCHER_PATH_VAR = "SPECTRON_LAUNCHER_PATH"


def build_environment(
    parent: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> dict[str, str]:
    """Return the full environment for the driver process.

    Every key of *parent* (default ``os.environ``) is inherited unchanged.
    On Windows the interpreter and launcher paths are added as well.
    """
    env = dict(os.environ if parent is None else parent)

    if (platform or sys.platform) == "win32":
        env[NODE_PATH_VAR] = sys.executable
        env[LAUNCHER_PATH_VAR] = str(LAUNCHER_PATH)

    return env
