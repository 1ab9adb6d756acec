# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""Line capture for the driver's standard output.

Each captured line is optionally appended to a raw persistence file and,
after the driver's startup banner, retained in an in-memory buffer that
callers read through snapshots.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)

# The driver prints a two-line banner before anything useful.
BANNER_LINES = 2


class LogCapture:
    """Capture, filter and optionally persist driver output lines."""

    def __init__(
        self,
        persist_path: Path | None = None,
        banner_lines: int = BANNER_LINES,
        name: str = "driver",
    ) -> None:
        self.persist_path = persist_path
        self.banner_lines = banner_lines
        self._lines: list[str] = []
        self._seen = 0
        self._generation = 0
        self._lock = threading.Lock()
        self._line_logger = logging.getLogger(f"driverkit.driver.{name}")
        self._reader: threading.Thread | None = None

    # ── Run lifecycle ──────────────────────────────────────

    def reset(self, persist_path: Path | None = None) -> int:
        """Start a new run and return its generation number."""
        with self._lock:
            self.persist_path = persist_path
            self._lines = []
            self._seen = 0
            self._generation += 1
            return self._generation

    def attach(self, stream: IO[bytes], persist_path: Path | None = None) -> None:
        """Begin a new run consuming *stream* on a background thread."""
        generation = self.reset(persist_path)
        self._reader = threading.Thread(
            target=self._read_stream,
            args=(stream, generation),
            name=f"{self._line_logger.name}-reader",
            daemon=True,
        )
        self._reader.start()

    def detach(self) -> None:
        """Drop any lines the current reader has not delivered yet."""
        with self._lock:
            self._generation += 1
        self._reader = None

    def _read_stream(self, stream: IO[bytes], generation: int) -> None:
        try:
            for raw in iter(stream.readline, b""):
                line = raw.decode("utf-8", errors="replace").rstrip("\n").rstrip("\r")
                if not self.feed(line, generation):
                    break
        except (OSError, ValueError) as e:
            logger.debug("Driver stdout reader exited: %s", e)
        finally:
            try:
                stream.close()
            except OSError as e:
                logger.debug("Failed to close driver stdout: %s", e)

    # ── Line handling ──────────────────────────────────────

    def feed(self, line: str, generation: int | None = None) -> bool:
        """Process one line of driver output.

        Returns False when *generation* belongs to a run that has since
        been detached, in which case the line is dropped.
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            persist_path = self.persist_path

        if persist_path is not None:
            self._persist(persist_path, line)

        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            if self._seen < self.banner_lines:
                self._seen += 1
                return True
            self._lines.append(line)

        self._line_logger.debug(line)
        return True

    def _persist(self, path: Path, line: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{line}\n")
        except OSError as e:
            logger.warning("Failed to persist driver output to %s: %s", path, e)

    # ── Buffer access ──────────────────────────────────────

    def snapshot(self) -> list[str]:
        """Return a copy of the retained lines."""
        with self._lock:
            return list(self._lines)

    def clear(self) -> None:
        """Empty the retained lines in place."""
        with self._lock:
            self._lines.clear()
