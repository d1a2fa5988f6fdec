"""UDP listener for bulb announcements.

Receives responses to our probes (and unsolicited announcements) on the
socket the prober sends from, parses them and records the bulbs.
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import TYPE_CHECKING

from .announcement import AnnouncementParseError, ParseMode, parse_announcement

if TYPE_CHECKING:
    from ..registry import DeviceRegistry

_LOGGER = logging.getLogger(__name__)

# Receive buffer size; longer datagrams are truncated by the kernel
DEFAULT_BUFFER_SIZE = 2048

# Seconds between cancellation checks while no datagram arrives
DEFAULT_POLL_INTERVAL = 1.0

# Windows reports truncated datagrams as an error instead of truncating
_WSAEMSGSIZE = 10040


def create_discovery_socket(
    poll_interval: float = DEFAULT_POLL_INTERVAL, ttl: int = 1
) -> socket.socket:
    """Create the UDP socket shared by the prober and the listener."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, ttl)
    sock.bind(("", 0))
    sock.settimeout(poll_interval)
    return sock


class Listener:
    """Receives datagrams until the stop event is set.

    Datagrams that do not parse as announcements are dropped. Socket
    errors other than the poll timeout propagate out of :meth:`run`.
    """

    def __init__(
        self,
        sock: socket.socket,
        registry: DeviceRegistry,
        stop_event: threading.Event,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        parse_mode: ParseMode = ParseMode.FIXED_OFFSET,
    ):
        self._sock = sock
        self._registry = registry
        self._stop_event = stop_event
        self.buffer_size = buffer_size
        self.parse_mode = ParseMode(parse_mode)
        self.datagrams_received = 0

    def run(self) -> None:
        """Receive and handle datagrams until cancelled.

        Raises:
            OSError: On a receive failure while not cancelled.
        """
        while not self._stop_event.is_set():
            try:
                data, addr = self._sock.recvfrom(self.buffer_size)
            except socket.timeout:
                continue
            except OSError as e:
                if self._stop_event.is_set():
                    break
                if getattr(e, "winerror", None) == _WSAEMSGSIZE:
                    _LOGGER.debug("Dropped oversized datagram")
                    continue
                raise

            self.handle_datagram(data, addr)

    def handle_datagram(self, data: bytes, addr: tuple) -> None:
        """Parse one datagram and upsert the bulb it describes."""
        self.datagrams_received += 1
        try:
            record = parse_announcement(
                data.decode("utf-8", errors="replace"), self.parse_mode
            )
        except AnnouncementParseError as e:
            _LOGGER.debug("Ignoring datagram from %s: %s", addr[0], e)
            return

        self._registry.upsert(record.id, record)
