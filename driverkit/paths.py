# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of DriverKit, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Centralized path resolution for DriverKit.

The runtime data directory can be overridden via the DRIVERKIT_DATA_DIR
environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path

# Package root: where the code lives
PACKAGE_DIR = Path(__file__).resolve().parent

# Launcher script handed to drivers that need to re-spawn through Python
LAUNCHER_PATH = PACKAGE_DIR / "launcher.py"

_DEFAULT_DATA_DIR = Path.home() / ".driverkit"


def get_data_dir() -> Path:
    """Return the runtime data directory, respecting DRIVERKIT_DATA_DIR env var."""
    env_val = os.environ.get("DRIVERKIT_DATA_DIR")
    if env_val:
        return Path(env_val).expanduser().resolve()
    return _DEFAULT_DATA_DIR


def get_config_path() -> Path:
    """Return the config file path, respecting DRIVERKIT_CONFIG env var."""
    env_val = os.environ.get("DRIVERKIT_CONFIG")
    if env_val:
        return Path(env_val).expanduser()
    return get_data_dir() / "config.json"


def get_log_dir() -> Path:
    return get_data_dir() / "logs"
