# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""DriverKit - lifecycle supervision for WebDriver-compatible driver processes."""

from __future__ import annotations

__version__ = "0.1.0"
