from __future__ import annotations
# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of DriverKit, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Unified exception hierarchy for DriverKit.

All domain-specific exceptions derive from :class:`DriverKitError`,
enabling callers to catch the entire family with a single clause::

    try:
        await supervisor.start()
    except DriverKitError as e:
        logger.error("Driver error: %s", e)
"""


class DriverKitError(Exception):
    """Base exception for all DriverKit errors."""


# ── Process ──────────────────────────────────────────────────


class ProcessError(DriverKitError):
    """Driver process lifecycle errors."""


class AlreadyStartedError(ProcessError, RuntimeError):
    """start() called while a driver process is already owned.

    This is a usage error and is raised synchronously, before anything
    is spawned.
    """


class DriverStartError(ProcessError):
    """The driver process did not become ready."""


class StoppedDuringStartError(DriverStartError):
    """stop() was called before readiness was confirmed."""


class StartTimeoutError(DriverStartError, TimeoutError):
    """The driver did not report ready within the start timeout."""

    def __init__(self, timeout: float, message: str | None = None) -> None:
        super().__init__(message or f"Driver did not start within {timeout}s")
        self.timeout = timeout


# ── Configuration ────────────────────────────────────────────


class ConfigError(DriverKitError):
    """Configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Configuration file not found."""


class ConfigValidationError(ConfigError):
    """Configuration validation failure."""


# ── Launcher ─────────────────────────────────────────────────


class LauncherError(DriverKitError):
    """Malformed launcher arguments."""
