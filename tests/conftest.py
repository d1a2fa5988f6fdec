"""Shared test fixtures for bulb discovery tests."""

from __future__ import annotations

import queue
import socket
import threading
from typing import Optional

import pytest

STATUS_AND_HEADERS = [
    "HTTP/1.1 200 OK",
    "Cache-Control: max-age=3600",
    "Date: ",
    "Ext: ",
]

BULB_ATTRIBUTES = [
    "Location: yeelight://192.168.1.9:55443",
    "Server: POSIX UPnP/1.0 YGLC/1",
    "id: 0x00000000124d7643",
    "model: color4",
    "fw_ver: 18",
    "support: get_prop set_default set_power toggle set_bright",
    "power: on",
    "bright: 5",
    "color_mode: 2",
    "ct: 5307",
    "rgb: 16737792",
    "hue: 24",
    "sat: 100",
    "name: ",
]

BULB_ADDR = ("192.168.1.9", 1982)


def build_datagram(
    attributes: list[str], headers: Optional[list[str]] = None
) -> bytes:
    """Build a response datagram the way bulbs send it (CRLF terminated lines)."""
    if headers is None:
        headers = STATUS_AND_HEADERS
    return ("\r\n".join(headers + attributes) + "\r\n").encode("utf-8")


def replace_attribute(attributes: list[str], key: str, value: str) -> list[str]:
    """Return a copy of ``attributes`` with ``key`` set to ``value``."""
    return [
        f"{key}: {value}" if line.split(":", 1)[0].strip().lower() == key else line
        for line in attributes
    ]


class FakeSocket:
    """In-memory stand-in for the shared UDP socket.

    ``recvfrom`` pops queued datagrams (or exceptions) and raises
    ``socket.timeout`` when the queue is empty. If ``drained_event`` is
    given it is set the first time the queue runs dry.
    """

    def __init__(self, poll_timeout: float = 0.01):
        self.sent: list[tuple[bytes, tuple]] = []
        self.closed = False
        self.send_error: Optional[BaseException] = None
        self.drained_event: Optional[threading.Event] = None
        self._incoming: queue.Queue = queue.Queue()
        self._poll_timeout = poll_timeout

    def feed(self, data: bytes, addr: tuple = BULB_ADDR) -> None:
        self._incoming.put((data, addr))

    def feed_error(self, error: BaseException) -> None:
        self._incoming.put(error)

    def sendto(self, data: bytes, addr: tuple) -> int:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((data, addr))
        return len(data)

    def recvfrom(self, bufsize: int):
        try:
            item = self._incoming.get(timeout=self._poll_timeout)
        except queue.Empty:
            if self.drained_event is not None:
                self.drained_event.set()
            raise socket.timeout("timed out")

        if isinstance(item, BaseException):
            raise item
        data, addr = item
        return data[:bufsize], addr

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def bulb_attributes() -> list[str]:
    """Attribute lines of a typical color bulb announcement."""
    return list(BULB_ATTRIBUTES)


@pytest.fixture
def bulb_datagram() -> bytes:
    """A complete response datagram from a color bulb."""
    return build_datagram(BULB_ATTRIBUTES)


@pytest.fixture
def fake_socket() -> FakeSocket:
    return FakeSocket()
