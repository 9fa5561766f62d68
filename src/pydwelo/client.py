"""High-level async client for the Dwelo API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from pydwelo._constants import COMMAND_LOCK, COMMAND_OFF, COMMAND_ON, COMMAND_UNLOCK, DEVICE_LIST_LIMIT
from pydwelo._transport import HttpTransport, Transport
from pydwelo.config import DweloConfig
from pydwelo.exceptions import DweloApiError, DweloError
from pydwelo.models.device import Device
from pydwelo.models.sensor import SensorReading

_logger = logging.getLogger(__name__)


def _list_results(body: Any, endpoint: str) -> list[dict[str, Any]]:
    """Extract ``results`` from a Dwelo list response.

    List endpoints answer ``{"resultsCount": n, "totalCount": n, "results": [...]}``.
    """
    if not isinstance(body, dict):
        raise DweloApiError(f"Expected an object from {endpoint}, got {type(body).__name__}", endpoint=endpoint)
    results = body.get("results")
    if not isinstance(results, list):
        raise DweloApiError(f"Missing 'results' list from {endpoint}", endpoint=endpoint)
    return [item for item in results if isinstance(item, dict)]


class DweloClient:
    """Async client for the Dwelo API.

    Usage::

        async with DweloClient(config) as client:
            devices = await client.get_devices()
            readings = await client.get_sensors(devices[0].uid)

    A :class:`DweloClient` satisfies :class:`pydwelo.lock.LockBackend`
    and can be handed directly to a :class:`pydwelo.lock.LockAccessory`.
    """

    def __init__(
        self,
        config: DweloConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None

    @property
    def config(self) -> DweloConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DweloClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise DweloError("Client not initialized. Use 'async with DweloClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_devices(self) -> list[Device]:
        """Fetch every device registered on the configured gateway."""
        endpoint = "/v3/device"
        body = await self._require_transport().request(
            "GET",
            endpoint,
            params={"gatewayId": self._config.gateway_id, "limit": DEVICE_LIST_LIMIT, "offset": 0},
        )
        try:
            devices = [Device.model_validate(item) for item in _list_results(body, endpoint)]
        except ValidationError as exc:
            raise DweloApiError(f"Malformed device entry from {endpoint}: {exc}", endpoint=endpoint) from exc
        _logger.debug("Gateway %s has %d device(s)", self._config.gateway_id, len(devices))
        return devices

    async def get_sensors(self, device_id: int) -> list[SensorReading]:
        """Fetch the latest sensor readings of a single device."""
        endpoint = f"/v3/sensor/gateway/{self._config.gateway_id}/"
        body = await self._require_transport().request("GET", endpoint, params={"deviceId": device_id})
        try:
            return [SensorReading.model_validate(item) for item in _list_results(body, endpoint)]
        except ValidationError as exc:
            raise DweloApiError(f"Malformed sensor entry from {endpoint}: {exc}", endpoint=endpoint) from exc

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def _command(self, device_id: int, command: str) -> None:
        endpoint = f"/v3/device/{device_id}/command/"
        await self._require_transport().request("POST", endpoint, payload={"command": command})
        _logger.debug("Sent command %r to device %s", command, device_id)

    async def toggle_lock(self, device_id: int, locked: bool) -> None:
        """Ask a lock to lock or unlock.

        Acceptance only means the gateway queued the command; the lock's
        sensors report the outcome later.
        """
        await self._command(device_id, COMMAND_LOCK if locked else COMMAND_UNLOCK)

    async def toggle_switch(self, device_id: int, on: bool) -> None:
        """Turn a switch on or off."""
        await self._command(device_id, COMMAND_ON if on else COMMAND_OFF)
