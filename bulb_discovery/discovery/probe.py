"""Multicast probe sender."""

from __future__ import annotations

import logging
import socket
import threading

_LOGGER = logging.getLogger(__name__)

# Well-known discovery endpoint for the bulbs
DEFAULT_MULTICAST_GROUP = "239.255.255.250"
DEFAULT_DISCOVERY_PORT = 1982

# Default cadence between probes in milliseconds
DEFAULT_SEARCH_INTERVAL_MS = 4000


def build_probe_message(
    group: str = DEFAULT_MULTICAST_GROUP, port: int = DEFAULT_DISCOVERY_PORT
) -> bytes:
    """Build the M-SEARCH probe payload (CRLF separated, no trailing CRLF)."""
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {group}:{port}",
        'MAN: "ssdp:discover"',
        "ST: wifi_bulb",
    ]
    return "\r\n".join(lines).encode("utf-8")


PROBE_MESSAGE = build_probe_message()


class Prober:
    """Periodically sends the discovery probe to the multicast group.

    Sending is fire-and-forget. A failed ``sendto`` is not retried: the
    ``OSError`` propagates out of :meth:`run` and ends the task.
    """

    def __init__(
        self,
        sock: socket.socket,
        stop_event: threading.Event,
        group: str = DEFAULT_MULTICAST_GROUP,
        port: int = DEFAULT_DISCOVERY_PORT,
    ):
        """Initialize prober.

        Args:
            sock: UDP socket shared with the listener.
            stop_event: Cancellation signal; set it to end :meth:`run`.
            group: Multicast group address.
            port: Discovery port.
        """
        self._sock = sock
        self._stop_event = stop_event
        self.destination = (group, port)
        self.message = build_probe_message(group, port)
        self.probes_sent = 0

    def send_once(self) -> None:
        """Send a single probe datagram."""
        _LOGGER.debug("Sending probe...")
        self._sock.sendto(self.message, self.destination)
        self.probes_sent += 1
        _LOGGER.debug("Finished sending probe")

    def run(self, interval_ms: int = DEFAULT_SEARCH_INTERVAL_MS) -> None:
        """Send a probe every ``interval_ms`` until the stop event is set.

        Raises:
            ValueError: If ``interval_ms`` is not positive.
            OSError: If a send fails.
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        interval = interval_ms / 1000
        while not self._stop_event.is_set():
            self.send_once()
            if self._stop_event.wait(interval):
                break
