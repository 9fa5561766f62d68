"""Discovery of the locks on a Dwelo gateway."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydwelo.client import DweloClient
from pydwelo.lock.accessory import LockAccessory
from pydwelo.lock.exposition import LockAttributes, LockExposition
from pydwelo.models.device import Device

_logger = logging.getLogger(__name__)

ExpositionFactory = Callable[[Device], LockExposition]


class DweloPlatform:
    """Builds and owns one :class:`LockAccessory` per lock on the gateway.

    Usage::

        async with DweloClient(config) as client:
            async with DweloPlatform(client) as platform:
                for accessory in await platform.discover_locks():
                    ...
    """

    def __init__(
        self,
        client: DweloClient,
        *,
        exposition_factory: ExpositionFactory | None = None,
    ) -> None:
        self._client = client
        self._exposition_factory = exposition_factory
        self._accessories: dict[int, LockAccessory] = {}

    @property
    def accessories(self) -> list[LockAccessory]:
        return list(self._accessories.values())

    def _build(self, device: Device) -> LockAccessory:
        config = self._client.config
        exposition = self._exposition_factory(device) if self._exposition_factory else LockAttributes()
        return LockAccessory(
            device.given_name or f"Lock {device.uid}",
            device.uid,
            self._client,
            poll_interval_ms=config.lock_poll_ms,
            auto_lock_minutes=config.auto_lock_minutes,
            exposition=exposition,
        )

    async def discover_locks(self) -> list[LockAccessory]:
        """Create accessories for every lock not seen before.

        Returns all known accessories, including ones from earlier calls.
        Devices of other types are skipped.
        """
        devices = await self._client.get_devices()
        for device in devices:
            if not device.is_lock:
                _logger.debug("Skipping %s device %s (%s)", device.device_type, device.uid, device.given_name)
                continue
            if device.uid in self._accessories:
                continue
            self._accessories[device.uid] = self._build(device)
        _logger.info("Discovered %d lock(s) on gateway %s", len(self._accessories), self._client.config.gateway_id)
        return self.accessories

    def start(self) -> None:
        for accessory in self._accessories.values():
            accessory.start()

    async def close(self) -> None:
        for accessory in self._accessories.values():
            await accessory.close()

    async def __aenter__(self) -> DweloPlatform:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
