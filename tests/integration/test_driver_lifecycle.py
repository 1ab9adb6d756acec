"""Integration tests for the driver lifecycle against a real stub driver process."""

# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import sys
import time
from pathlib import Path

import pytest

from driverkit.config import DriverConfig
from driverkit.exceptions import StartTimeoutError, StoppedDuringStartError
from driverkit.supervisor import ProcessState, ProcessSupervisor, ShutdownRegistry
from tests.helpers.waiting import wait_for

pytestmark = pytest.mark.integration


def _config(stub_driver: Path, port: int, tmp_path: Path, **kwargs) -> DriverConfig:
    return DriverConfig(
        host="127.0.0.1",
        port=port,
        node_path=Path(sys.executable),
        driver_path=stub_driver,
        working_directory=tmp_path,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_becomes_ready_after_warmup(
    stub_driver: Path, free_port: int, tmp_path: Path,
    registry: ShutdownRegistry, monkeypatch: pytest.MonkeyPatch,
):
    """Endpoint reports not-ready for 300ms, then ready; start() resolves in between."""
    monkeypatch.setenv("STUB_READY_AFTER", "0.3")
    monkeypatch.setenv("STUB_MARKER", "inherited")
    supervisor = ProcessSupervisor(
        _config(stub_driver, free_port, tmp_path, start_timeout=2.0),
        shutdown_registry=registry,
    )

    try:
        start = time.monotonic()
        await supervisor.start()
        elapsed = time.monotonic() - start

        assert 0.3 <= elapsed < 2.0
        assert supervisor.state == ProcessState.RUNNING
        assert supervisor.is_running()
        assert supervisor._on_exit in registry

        assert await wait_for(lambda: len(supervisor.get_logs()) >= 2)
        logs = supervisor.get_logs()
        assert logs[:2] == [
            "STUB_MARKER=inherited",
            "StubDriver was started successfully.",
        ]
        assert not any("Only local connections" in line for line in logs)
    finally:
        process = supervisor._process
        supervisor.stop()

    assert process is not None
    assert await wait_for(lambda: process.poll() is not None)
    assert supervisor.get_logs() == []
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_connection_refused_times_out(
    stub_driver: Path, free_port: int, tmp_path: Path,
    registry: ShutdownRegistry, monkeypatch: pytest.MonkeyPatch,
):
    """A driver that never listens fails with StartTimeoutError shortly after 300ms."""
    monkeypatch.setenv("STUB_NO_SERVER", "1")
    supervisor = ProcessSupervisor(
        _config(stub_driver, free_port, tmp_path, start_timeout=0.3),
        shutdown_registry=registry,
    )

    start = time.monotonic()
    task = supervisor.start()
    process = supervisor._process
    assert len(registry) == 1
    with pytest.raises(StartTimeoutError, match=r"0\.3"):
        await task
    elapsed = time.monotonic() - start

    assert 0.3 <= elapsed < 1.0
    assert supervisor.state == ProcessState.IDLE
    assert await wait_for(lambda: process.poll() is not None)
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_stop_while_starting(
    stub_driver: Path, free_port: int, tmp_path: Path,
    registry: ShutdownRegistry, monkeypatch: pytest.MonkeyPatch,
):
    monkeypatch.setenv("STUB_NO_SERVER", "1")
    supervisor = ProcessSupervisor(
        _config(stub_driver, free_port, tmp_path, start_timeout=10.0),
        shutdown_registry=registry,
    )

    task = supervisor.start()
    assert await wait_for(lambda: supervisor.state == ProcessState.STARTING)
    assert supervisor._on_exit in registry
    supervisor.stop()

    with pytest.raises(StoppedDuringStartError):
        await task
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_log_path_enables_raw_capture(
    stub_driver: Path, free_port: int, tmp_path: Path, registry: ShutdownRegistry,
):
    log_path = tmp_path / "logs" / "chromedriver.log"
    supervisor = ProcessSupervisor(
        _config(stub_driver, free_port, tmp_path, start_timeout=5.0, log_path=log_path),
        shutdown_registry=registry,
    )
    log_path.parent.mkdir(parents=True)

    try:
        await supervisor.start()
        assert len(registry) == 1
        raw = tmp_path / "logs" / "chromedriver-exodus.log"
        assert await wait_for(
            lambda: raw.exists() and "StubDriver was started" in raw.read_text(encoding="utf-8")
        )
        raw_lines = raw.read_text(encoding="utf-8").splitlines()
        assert raw_lines[0] == f"Starting StubDriver on port {free_port}"
        assert raw_lines[1] == "Only local connections are allowed."
        assert log_path.read_text(encoding="utf-8") == "[stub] verbose=True\n"
    finally:
        supervisor.stop()


@pytest.mark.asyncio
async def test_sequential_lifecycles(
    stub_driver: Path, free_port: int, tmp_path: Path, registry: ShutdownRegistry,
):
    supervisor = ProcessSupervisor(
        _config(stub_driver, free_port, tmp_path, start_timeout=5.0),
        shutdown_registry=registry,
    )

    pids = []
    for _ in range(2):
        try:
            await supervisor.start()
            pids.append(supervisor.pid)
            assert len(registry) == 1
            assert await wait_for(lambda: len(supervisor.get_logs()) >= 2)
            assert supervisor.get_logs()[0].startswith("STUB_MARKER=")
        finally:
            process = supervisor._process
            supervisor.stop()
        # The next run binds the same port
        assert await wait_for(lambda: process.poll() is not None)

    assert pids[0] != pids[1]
    assert len(registry) == 0
