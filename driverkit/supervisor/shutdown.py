# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""Exit-time cleanup registry.

A :class:`ShutdownRegistry` collects cleanup callbacks (one per running
supervisor) and runs them when the interpreter exits. The registry is
bound to :mod:`atexit` once, the first time a callback is registered.
"""

from __future__ import annotations

import atexit
import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ShutdownRegistry:
    """Registry of callbacks to run on host-process exit."""

    def __init__(self) -> None:
        self._hooks: list[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._installed = False

    def register(self, hook: Callable[[], None]) -> None:
        """Register *hook*; registering the same hook twice is a no-op."""
        with self._lock:
            if hook in self._hooks:
                return
            self._hooks.append(hook)
            if not self._installed:
                atexit.register(self.run_all)
                self._installed = True

    def unregister(self, hook: Callable[[], None]) -> None:
        """Remove *hook* if present."""
        with self._lock:
            if hook in self._hooks:
                self._hooks.remove(hook)

    def __contains__(self, hook: object) -> bool:
        with self._lock:
            return hook in self._hooks

    def __len__(self) -> int:
        with self._lock:
            return len(self._hooks)

    def run_all(self) -> None:
        """Run every registered hook, newest first.

        A failing hook is logged and does not prevent the others from
        running.
        """
        with self._lock:
            hooks = list(reversed(self._hooks))
        for hook in hooks:
            try:
                hook()
            except Exception:
                logger.exception("Shutdown hook %r failed", hook)


_default_registry: ShutdownRegistry | None = None


def get_default_registry() -> ShutdownRegistry:
    """Return the process-wide registry used when none is supplied."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ShutdownRegistry()
    return _default_registry
