from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pydwelo.client import DweloClient
from pydwelo.config import DweloConfig
from pydwelo.exceptions import DweloApiError, DweloError, DweloTransportError
from pydwelo.models.device import DeviceType

GATEWAY_ID = "777"


@dataclass
class FakeDweloBackend:
    """In-memory stand-in for the Dwelo HTTP API."""

    calls: list[tuple[str, str, dict[str, Any] | None, dict[str, Any] | None]] = field(default_factory=list)
    responses: dict[tuple[str, str], Any] = field(default_factory=dict)
    error: Exception | None = None

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        self.calls.append(
            (method, endpoint, dict(params) if params else None, dict(payload) if payload else None)
        )
        if self.error is not None:
            raise self.error
        return self.responses.get((method, endpoint))


def _client(backend: FakeDweloBackend) -> DweloClient:
    client = DweloClient(DweloConfig(token="secret-token", gateway_id=GATEWAY_ID))
    client._transport = backend  # noqa: SLF001
    return client


@pytest.mark.asyncio
async def test_get_devices_parses_results() -> None:
    backend = FakeDweloBackend(
        responses={
            ("GET", "/v3/device"): {
                "resultsCount": 2,
                "totalCount": 2,
                "results": [
                    {"uid": 1, "givenName": "Front Door", "deviceType": "lock", "gatewayId": GATEWAY_ID},
                    {"uid": 2, "givenName": "Hall Light", "deviceType": "switch", "gatewayId": GATEWAY_ID},
                ],
            }
        }
    )

    devices = await _client(backend).get_devices()

    assert [d.uid for d in devices] == [1, 2]
    assert devices[0].device_type == DeviceType.LOCK
    assert devices[1].device_type == DeviceType.SWITCH
    assert backend.calls == [
        ("GET", "/v3/device", {"gatewayId": GATEWAY_ID, "limit": 5000, "offset": 0}, None),
    ]


@pytest.mark.asyncio
async def test_get_sensors_parses_readings() -> None:
    endpoint = f"/v3/sensor/gateway/{GATEWAY_ID}/"
    backend = FakeDweloBackend(
        responses={
            ("GET", endpoint): {
                "resultsCount": 2,
                "totalCount": 2,
                "results": [
                    {"deviceId": 1, "sensorType": "lock", "value": "locked", "timeIssued": "2026-01-01T00:00:00Z"},
                    {"deviceId": 1, "sensorType": "battery", "value": "64", "timeIssued": "2026-01-01T00:00:00Z"},
                ],
            }
        }
    )

    readings = await _client(backend).get_sensors(1)

    assert [(r.kind, r.value) for r in readings] == [("lock", "locked"), ("battery", "64")]
    assert backend.calls == [("GET", endpoint, {"deviceId": 1}, None)]


@pytest.mark.asyncio
@pytest.mark.parametrize(("locked", "command"), [(True, "lock"), (False, "unlock")])
async def test_toggle_lock_posts_command(locked: bool, command: str) -> None:
    backend = FakeDweloBackend()

    await _client(backend).toggle_lock(1, locked)

    assert backend.calls == [("POST", "/v3/device/1/command/", None, {"command": command})]


@pytest.mark.asyncio
@pytest.mark.parametrize(("on", "command"), [(True, "on"), (False, "off")])
async def test_toggle_switch_posts_command(on: bool, command: str) -> None:
    backend = FakeDweloBackend()

    await _client(backend).toggle_switch(2, on)

    assert backend.calls == [("POST", "/v3/device/2/command/", None, {"command": command})]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [None, [], {"resultsCount": 0}, {"results": "nope"}, {"results": [{"givenName": "no uid"}]}],
)
async def test_unusable_list_body_raises_api_error(body: Any) -> None:
    backend = FakeDweloBackend(responses={("GET", "/v3/device"): body})

    with pytest.raises(DweloApiError):
        await _client(backend).get_devices()


@pytest.mark.asyncio
async def test_transport_errors_propagate() -> None:
    backend = FakeDweloBackend(error=DweloTransportError("HTTP 401", status_code=401, endpoint="/v3/device/1/command/"))

    with pytest.raises(DweloTransportError) as excinfo:
        await _client(backend).toggle_lock(1, True)
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_client_requires_context_manager() -> None:
    client = DweloClient(DweloConfig(token="secret-token", gateway_id=GATEWAY_ID))

    with pytest.raises(DweloError, match="not initialized"):
        await client.get_devices()
