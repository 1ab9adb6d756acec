# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0
"""Readiness polling against the driver's ``/status`` endpoint."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import httpx

from driverkit.exceptions import StartTimeoutError, StoppedDuringStartError

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds between the end of one check and the next
_MIN_REQUEST_TIMEOUT = 0.01


class HealthPoller:
    """Poll a status URL until the driver reports ready.

    A check counts as ready only when the JSON body carries a truthy
    ``value.ready``. Connection errors, non-2xx responses and malformed
    bodies all count as "not ready"; refused connections are expected
    while the driver boots.
    """

    def __init__(
        self,
        status_url: str,
        start_timeout: float,
        interval: float = POLL_INTERVAL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.status_url = status_url
        self.start_timeout = start_timeout
        self.interval = interval
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    async def check(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
    ) -> bool:
        """Perform a single status request and report readiness."""
        if client is None:
            async with self._client() as owned:
                return await self.check(owned, timeout=timeout)

        try:
            resp = await client.get(self.status_url, timeout=timeout)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Status check failed for %s: %s", self.status_url, e)
            return False

        value = body.get("value") if isinstance(body, dict) else None
        return bool(isinstance(value, dict) and value.get("ready"))

    async def wait_until_ready(self, is_alive: Callable[[], bool]) -> None:
        """Block until ready, or raise when stopped or out of time.

        *is_alive* reports whether the owning supervisor still holds its
        process; once it returns False the wait ends with
        :class:`StoppedDuringStartError` regardless of elapsed time.

        Raises:
            StoppedDuringStartError: The supervisor was stopped first.
            StartTimeoutError: ``start_timeout`` elapsed without a ready check.
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + self.start_timeout
        attempts = 0

        async with self._client() as client:
            while True:
                attempts += 1
                # No request may outlive the deadline by more than one interval
                limit = deadline + self.interval - loop.time()
                running = await self.check(client, timeout=max(limit, _MIN_REQUEST_TIMEOUT))

                if not is_alive():
                    logger.error("Driver for %s has been stopped", self.status_url)
                    raise StoppedDuringStartError("Driver has been stopped")

                if running:
                    logger.info(
                        "Driver ready at %s (%.2fs, %d checks)",
                        self.status_url, loop.time() - started, attempts,
                    )
                    return

                if loop.time() - started > self.start_timeout:
                    logger.error(
                        "Driver at %s did not start within %ss",
                        self.status_url, self.start_timeout,
                    )
                    raise StartTimeoutError(self.start_timeout)

                await asyncio.sleep(self.interval)
