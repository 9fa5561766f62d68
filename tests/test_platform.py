from __future__ import annotations

from typing import Any

import pytest

from pydwelo.client import DweloClient
from pydwelo.config import DweloConfig
from pydwelo.exceptions import DweloError
from pydwelo.lock.exposition import LockAttributes
from pydwelo.models.device import Device
from pydwelo.models.lock import LockState
from pydwelo.platform import DweloPlatform


class _FakeTransport:
    def __init__(self, devices: list[dict[str, Any]]) -> None:
        self.devices = devices
        self.endpoints: list[str] = []

    async def request(self, method: str, endpoint: str, **_kwargs: Any) -> Any:
        self.endpoints.append(endpoint)
        if endpoint == "/v3/device":
            return {"resultsCount": len(self.devices), "totalCount": len(self.devices), "results": self.devices}
        if endpoint.startswith("/v3/sensor/gateway/"):
            return {"results": [{"sensorType": "lock", "value": "locked"}]}
        return None


def _client(transport: _FakeTransport, **config: Any) -> DweloClient:
    client = DweloClient(DweloConfig(token="tok", gateway_id="777", **config))
    client._transport = transport  # noqa: SLF001
    return client


@pytest.mark.asyncio
async def test_discover_locks_builds_one_accessory_per_lock() -> None:
    transport = _FakeTransport(
        [
            {"uid": 1, "givenName": "Front Door", "deviceType": "lock"},
            {"uid": 2, "givenName": "Hall Light", "deviceType": "switch"},
            {"uid": 3, "givenName": "", "deviceType": "lock"},
        ]
    )
    client = _client(transport, lock_poll_ms=2000, auto_lock_minutes=5)

    async with DweloPlatform(client) as platform:
        accessories = await platform.discover_locks()

        assert [(a.lock_id, a.name) for a in accessories] == [(1, "Front Door"), (3, "Lock 3")]
        assert all(a.auto_lock_enabled for a in accessories)
        assert accessories[0].exposition is not accessories[1].exposition

        # Rediscovery keeps existing accessories.
        again = await platform.discover_locks()
        assert again[0] is accessories[0]


@pytest.mark.asyncio
async def test_accessories_use_client_as_backend_and_custom_exposition() -> None:
    transport = _FakeTransport([{"uid": 1, "givenName": "Front Door", "deviceType": "lock"}])
    seen: list[int] = []

    def _factory(device: Device) -> LockAttributes:
        seen.append(device.uid)
        return LockAttributes()

    async with DweloPlatform(_client(transport), exposition_factory=_factory) as platform:
        (accessory,) = await platform.discover_locks()
        await accessory.poll()

        assert seen == [1]
        assert isinstance(accessory.exposition, LockAttributes)
        assert accessory.exposition.current_state == LockState.SECURED
        assert "/v3/sensor/gateway/777/" in transport.endpoints


@pytest.mark.asyncio
async def test_start_and_close_control_polling() -> None:
    transport = _FakeTransport([{"uid": 1, "deviceType": "lock"}])
    platform = DweloPlatform(_client(transport))
    (accessory,) = await platform.discover_locks()

    platform.start()
    await platform.close()

    with pytest.raises(DweloError, match="closed"):
        accessory.start()
