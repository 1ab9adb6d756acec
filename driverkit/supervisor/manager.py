"""
Process Supervisor - Owns one driver child process from spawn to teardown.
"""

# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import asyncio
import logging
import subprocess
import threading
from collections.abc import Callable
from enum import Enum

import httpx

from driverkit.config import DriverConfig
from driverkit.exceptions import AlreadyStartedError, StoppedDuringStartError
from driverkit.logging_config import bind_driver_context
from driverkit.supervisor.environment import build_environment
from driverkit.supervisor.health import HealthPoller
from driverkit.supervisor.log_capture import LogCapture
from driverkit.supervisor.shutdown import ShutdownRegistry, get_default_registry

logger = logging.getLogger(__name__)

_REAP_WAIT_SEC = 0.1


# ── Process State ──────────────────────────────────────────────────

class ProcessState(Enum):
    """Lifecycle state of a supervisor."""
    IDLE = "idle"               # No process owned
    STARTING = "starting"       # Process spawned, readiness pending
    RUNNING = "running"         # Status endpoint reported ready


# ── Process Supervisor ─────────────────────────────────────────────

class ProcessSupervisor:
    """
    Supervisor for a single WebDriver-compatible driver process.

    Responsibilities:
    - Spawn the driver with the inherited environment
    - Capture its stdout (banner filtered, optional raw persistence)
    - Poll its status endpoint until ready, timed out or stopped
    - Kill it on stop() or, failing that, at interpreter exit

    A supervisor can be started again after stop(); it never owns more
    than one process at a time.
    """

    def __init__(
        self,
        config: DriverConfig,
        shutdown_registry: ShutdownRegistry | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        platform: str | None = None,
    ):
        self.config = config
        self._registry = (
            shutdown_registry if shutdown_registry is not None else get_default_registry()
        )
        self._transport = transport
        self._platform = platform

        self._lock = threading.RLock()
        self._process: subprocess.Popen | None = None
        self._state = ProcessState.IDLE
        self._exit_handler: Callable[[], None] | None = None
        self._logs = LogCapture(name=str(config.port))

        logger.info(
            "Created driver supervisor host=%s port=%s status_url=%s",
            config.host, config.port, config.status_url,
        )

    # ── Introspection ──────────────────────────────────────────────

    @property
    def state(self) -> ProcessState:
        return self._state

    @property
    def pid(self) -> int | None:
        process = self._process
        return process.pid if process else None

    @property
    def returncode(self) -> int | None:
        """Exit code of the owned process, or None while it runs."""
        process = self._process
        return process.poll() if process else None

    def is_running(self) -> bool:
        """Whether a process is owned and still alive."""
        process = self._process
        return process is not None and process.poll() is None

    def build_args(self) -> list[str]:
        """Return the driver arguments (everything after the interpreter)."""
        config = self.config
        args = [
            str(config.driver_path),
            f"--port={config.port}",
            f"--url-base={config.url_base}",
        ]
        if config.log_path is not None:
            args.append("--verbose")
            args.append(f"--log-path={config.log_path}")
        return args

    # ── Lifecycle ──────────────────────────────────────────────────

    def start(self) -> asyncio.Task[None]:
        """
        Spawn the driver and return a task that completes once it is ready.

        Must be called from a running event loop.

        Raises:
            AlreadyStartedError: A process is already owned (nothing spawned).

        The returned task fails with StartTimeoutError or
        StoppedDuringStartError; on any failure other than a stop the
        supervisor has already been stopped when the task completes.
        """
        loop = asyncio.get_running_loop()

        with self._lock:
            if self._process is not None:
                raise AlreadyStartedError(
                    f"Driver already started on port {self.config.port}"
                )

            cmd = [str(self.config.node_path), *self.build_args()]
            logger.info("Starting driver for port=%s", self.config.port)
            logger.debug("Command: %s", " ".join(cmd))

            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    cwd=str(self.config.working_directory),
                    env=build_environment(platform=self._platform),
                )
            except OSError as e:
                logger.error("Failed to spawn driver for port=%s: %s", self.config.port, e)
                raise

            self._process = process
            self._state = ProcessState.STARTING
            self._exit_handler = self._on_exit
            self._registry.register(self._exit_handler)

        logger.info("Driver spawned: port=%s (PID %s)", self.config.port, process.pid)
        self._logs.attach(process.stdout, self.config.raw_log_path)
        return loop.create_task(self._wait_until_running(process))

    async def _wait_until_running(self, process: subprocess.Popen) -> None:
        bind_driver_context(self.config.port)
        poller = HealthPoller(
            self.config.status_url,
            self.config.start_timeout,
            transport=self._transport,
        )
        try:
            await poller.wait_until_ready(lambda: self._owns(process))
        except StoppedDuringStartError:
            raise
        except BaseException:
            self._stop_if_current(process)
            raise

        with self._lock:
            if self._process is process:
                self._state = ProcessState.RUNNING

    def _owns(self, process: subprocess.Popen) -> bool:
        with self._lock:
            return self._process is process

    def _stop_if_current(self, process: subprocess.Popen) -> None:
        with self._lock:
            if self._process is not process:
                return
        self.stop()

    def _on_exit(self) -> None:
        logger.info("Interpreter exiting, stopping driver for port=%s", self.config.port)
        self.stop()

    def stop(self) -> None:
        """
        Kill the driver and reset all per-run state.

        Safe to call at any time, any number of times; never raises.
        """
        logger.info("Driver stop requested for port=%s", self.config.port)
        with self._lock:
            if self._exit_handler is not None:
                self._registry.unregister(self._exit_handler)
                self._exit_handler = None
            process, self._process = self._process, None
            self._state = ProcessState.IDLE

        try:
            self._logs.detach()
            if process is not None:
                self._kill(process)
        finally:
            self._logs.clear()

    def _kill(self, process: subprocess.Popen) -> None:
        """Force kill *process* and reap it, best effort."""
        if process.poll() is not None:
            logger.debug("Driver already exited (PID %s, code=%s)", process.pid, process.returncode)
            return
        try:
            process.kill()
        except OSError as e:
            logger.warning("Failed to kill driver (PID %s): %s", process.pid, e)
            return
        try:
            process.wait(timeout=_REAP_WAIT_SEC)
        except subprocess.TimeoutExpired:
            # Popen reaps the zombie on a later poll()
            logger.debug("Driver (PID %s) not reaped yet after SIGKILL", process.pid)

    # ── Logs ───────────────────────────────────────────────────────

    def get_logs(self) -> list[str]:
        """Return a copy of the lines captured since the banner."""
        return self._logs.snapshot()

    def clear_logs(self) -> None:
        self._logs.clear()
