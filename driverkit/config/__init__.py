# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from driverkit.config.models import (
    DEFAULT_RAW_LOG_SUFFIX,
    URL_BASE,
    DriverConfig,
    load_config,
)

__all__ = [
    "DEFAULT_RAW_LOG_SUFFIX",
    "URL_BASE",
    "DriverConfig",
    "load_config",
]
