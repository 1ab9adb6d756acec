# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from driverkit.config import URL_BASE, DriverConfig, load_config
from driverkit.exceptions import ConfigError, DriverStartError
from driverkit.supervisor import (
    POLL_INTERVAL,
    HealthPoller,
    ProcessSupervisor,
    ShutdownRegistry,
)

logger = logging.getLogger(__name__)


def _config_from_args(args: argparse.Namespace) -> DriverConfig:
    return load_config(
        Path(args.config) if args.config else None,
        host=args.host,
        port=args.port,
        driver_path=args.driver_path,
        node_path=args.node_path,
        start_timeout=args.start_timeout,
        log_path=args.log_path,
        working_directory=args.cwd,
    )


def _print_new_lines(supervisor: ProcessSupervisor, printed: int) -> int:
    """Echo captured lines not printed yet; return the new count."""
    lines = supervisor.get_logs()
    for line in lines[printed:]:
        print(line)
    return len(lines)


async def _supervise(config: DriverConfig) -> int:
    registry = ShutdownRegistry()
    supervisor = ProcessSupervisor(config, shutdown_registry=registry)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops: KeyboardInterrupt still unwinds to stop()
            pass

    try:
        try:
            await supervisor.start()
        except DriverStartError as e:
            print(f"Error: {e}")
            return 1

        print(f"Driver ready at {config.status_url} (pid={supervisor.pid})")
        printed = 0
        while not stop_event.is_set():
            printed = _print_new_lines(supervisor, printed)
            if not supervisor.is_running():
                print(f"Driver exited with code {supervisor.returncode}")
                return 1
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=POLL_INTERVAL)
            except TimeoutError:
                pass
        logger.info("Stop requested, shutting down driver")
        _print_new_lines(supervisor, printed)
        return 0
    finally:
        supervisor.stop()


def cmd_run(args: argparse.Namespace) -> None:
    """Start a driver and keep it running until SIGINT/SIGTERM."""
    try:
        config = _config_from_args(args)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        code = asyncio.run(_supervise(config))
    except OSError as e:
        print(f"Error: failed to spawn driver: {e}")
        code = 1
    sys.exit(code)


def cmd_status(args: argparse.Namespace) -> None:
    """Query a driver's status endpoint once."""
    url = f"http://{args.host}:{args.port}{URL_BASE}status"
    poller = HealthPoller(url, start_timeout=args.timeout)
    ready = asyncio.run(poller.check(timeout=args.timeout))
    print("ready" if ready else "not ready")
    sys.exit(0 if ready else 1)
