"""Thread-safe registry of discovered bulbs."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .discovery.announcement import DeviceRecord

_LOGGER = logging.getLogger(__name__)


class DeviceRegistry:
    """Last-writer-wins map of device id to the latest DeviceRecord.

    Entries never expire: a bulb that stops announcing stays registered
    for the lifetime of the registry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._devices: dict[str, DeviceRecord] = {}
        self._callbacks: list[Callable[[DeviceRecord], None]] = []

    def on_device_found(
        self, callback: Callable[[DeviceRecord], None]
    ) -> Callable[[], None]:
        """Register a callback for ids seen for the first time. Returns unregister function."""
        self._callbacks.append(callback)

        def unregister() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unregister

    def upsert(self, device_id: str, record: DeviceRecord) -> None:
        """Store ``record`` under ``device_id``, replacing any previous record."""
        with self._lock:
            is_new = device_id not in self._devices
            self._devices[device_id] = record

        if is_new:
            _LOGGER.debug("Discovered device %s at %s", device_id, record.location)
            for callback in list(self._callbacks):
                try:
                    callback(record)
                except Exception:
                    _LOGGER.warning("Device callback failed for %s", device_id, exc_info=True)

    def get(self, device_id: str) -> Optional[DeviceRecord]:
        with self._lock:
            return self._devices.get(device_id)

    def snapshot(self) -> dict[str, DeviceRecord]:
        """Return a point-in-time copy of all registered devices."""
        with self._lock:
            return dict(self._devices)

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        with self._lock:
            return device_id in self._devices
