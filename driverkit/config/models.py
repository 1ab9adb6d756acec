# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of DriverKit, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Driver configuration model and loader.

Defines the immutable :class:`DriverConfig` and :func:`load_config`, which
layers an optional JSON file, ``DRIVERKIT_*`` environment variables and
explicit overrides (in that order of increasing priority).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from driverkit.exceptions import ConfigNotFoundError, ConfigValidationError
from driverkit.paths import get_config_path

logger = logging.getLogger(__name__)

# The driver is always mounted at the path root.
URL_BASE = "/"

# Suffix for the raw stdout capture file derived from log_path.
DEFAULT_RAW_LOG_SUFFIX = "-exodus"

_ENV_FIELDS: dict[str, str] = {
    "DRIVERKIT_HOST": "host",
    "DRIVERKIT_PORT": "port",
    "DRIVERKIT_NODE_PATH": "node_path",
    "DRIVERKIT_DRIVER_PATH": "driver_path",
    "DRIVERKIT_START_TIMEOUT": "start_timeout",
    "DRIVERKIT_WORKDIR": "working_directory",
    "DRIVERKIT_LOG_PATH": "log_path",
}


class DriverConfig(BaseModel):
    """Immutable settings for one supervised driver process."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = "localhost"
    port: int = Field(default=9515, ge=1, le=65535)
    node_path: Path = Field(default_factory=lambda: Path(sys.executable))
    driver_path: Path
    start_timeout: float = Field(default=5.0, gt=0)  # seconds
    working_directory: Path = Field(default_factory=Path.cwd)
    log_path: Path | None = None
    raw_log_suffix: str = DEFAULT_RAW_LOG_SUFFIX

    @property
    def url_base(self) -> str:
        return URL_BASE

    @property
    def status_url(self) -> str:
        return f"http://{self.host}:{self.port}{URL_BASE}status"

    @property
    def raw_log_path(self) -> Path | None:
        """Sibling of log_path that receives every raw stdout line.

        ``logs/chromedriver.log`` becomes ``logs/chromedriver-exodus.log``.
        The stem is cut at the first dot; the last extension is kept.
        """
        if self.log_path is None:
            return None
        stem = self.log_path.name.split(".")[0]
        return self.log_path.with_name(f"{stem}{self.raw_log_suffix}{self.log_path.suffix}")


def _read_env() -> dict[str, str]:
    return {
        field: os.environ[var]
        for var, field in _ENV_FIELDS.items()
        if os.environ.get(var)
    }


def load_config(path: Path | None = None, **overrides: Any) -> DriverConfig:
    """Build a :class:`DriverConfig` from file, environment and overrides.

    If *path* is ``None``, :func:`get_config_path` determines the location
    and a missing file is silently skipped. An explicitly given *path* that
    does not exist raises :class:`ConfigNotFoundError`. Overrides whose value
    is ``None`` are ignored so CLI defaults do not mask lower layers.
    """
    explicit = path is not None
    if path is None:
        path = get_config_path()

    data: dict[str, Any] = {}
    if path.is_file():
        logger.debug("Loading config from %s", path)
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigValidationError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigValidationError(f"Config root in {path} must be an object")
        data.update(loaded)
    elif explicit:
        raise ConfigNotFoundError(f"Config file not found: {path}")

    data.update(_read_env())
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DriverConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
