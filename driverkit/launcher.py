#!/usr/bin/env python3
# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""Argument-forwarding launcher.

Drivers that cannot start the application binary directly (Windows)
invoke this script through ``SPECTRON_NODE_PATH`` /
``SPECTRON_LAUNCHER_PATH``. Recognised ``--spectron-*`` arguments are
consumed; everything else is forwarded to the application::

    --spectron-path=<exe>          executable to run
    --spectron-arg<N>=<value>      application argument at position N
    --spectron-env-<NAME>=<value>  environment variable for the child
    --spectron-create-file=<path>  ensure the file exists before spawning

The application's exit code becomes the launcher's exit code.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

from driverkit.exceptions import LauncherError

logger = logging.getLogger(__name__)

_PREFIX = "--spectron-"
_PATH = "--spectron-path"
_ARG = "--spectron-arg"
_ENV = "--spectron-env-"
_CREATE_FILE = "--spectron-create-file"


@dataclass
class LaunchPlan:
    """Parsed launcher invocation."""
    executable: str | None = None
    app_args: dict[int, str] = field(default_factory=dict)
    forwarded: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    create_files: list[Path] = field(default_factory=list)

    @property
    def args(self) -> list[str]:
        """Indexed application arguments followed by forwarded ones."""
        return [self.app_args[i] for i in sorted(self.app_args)] + self.forwarded


def parse_launcher_args(argv: list[str]) -> LaunchPlan:
    """Split *argv* into launcher directives and forwarded arguments."""
    plan = LaunchPlan()
    for arg in argv:
        name, sep, value = arg.partition("=")
        if not sep:
            plan.forwarded.append(arg)
        elif name == _PATH:
            plan.executable = value
        elif name.startswith(_ARG):
            try:
                index = int(name[len(_ARG):])
            except ValueError as e:
                raise LauncherError(f"Invalid argument index in {name!r}") from e
            plan.app_args[index] = value
        elif name.startswith(_ENV):
            plan.env[name[len(_ENV):]] = value
        elif name.startswith(_CREATE_FILE):
            plan.create_files.append(Path(value))
        elif not name.startswith(_PREFIX):
            plan.forwarded.append(arg)
    return plan


def _ensure_file(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)


def main(argv: list[str] | None = None) -> int:
    """Run the application described by *argv* and return its exit code."""
    plan = parse_launcher_args(sys.argv[1:] if argv is None else argv)
    if not plan.executable:
        raise LauncherError(f"{_PATH}=<executable> is required")

    for path in plan.create_files:
        _ensure_file(path)

    env = {**os.environ, **plan.env}
    logger.debug("Launching %s %s", plan.executable, plan.args)
    result = subprocess.run(
        [plan.executable, *plan.args],
        env=env,
        stderr=subprocess.STDOUT,
    )
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
