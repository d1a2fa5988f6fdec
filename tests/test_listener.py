"""Tests for the announcement Listener."""

from __future__ import annotations

import socket
import threading

import pytest

from bulb_discovery.discovery.announcement import ParseMode
from bulb_discovery.discovery.listener import Listener
from bulb_discovery.registry import DeviceRegistry

from conftest import STATUS_AND_HEADERS, build_datagram, replace_attribute


def _run_until_drained(sock, registry, **kwargs) -> Listener:
    """Run a listener in this thread until the fake socket runs dry."""
    stop_event = threading.Event()
    sock.drained_event = stop_event
    listener = Listener(sock, registry, stop_event, **kwargs)
    listener.run()
    return listener


class TestListener:
    """Tests for Listener.run and handle_datagram."""

    def test_valid_datagram_is_registered(self, fake_socket, bulb_datagram):
        registry = DeviceRegistry()
        fake_socket.feed(bulb_datagram)

        listener = _run_until_drained(fake_socket, registry)

        assert "0x00000000124d7643" in registry
        assert listener.datagrams_received == 1

    def test_invalid_datagrams_are_dropped(self, fake_socket, bulb_datagram):
        registry = DeviceRegistry()
        fake_socket.feed(b"NOTIFY * HTTP/1.1\r\nHOST: 239.255.255.250:1982\r\n\r\n")
        fake_socket.feed(b"\xff\xfe\x00garbage")
        fake_socket.feed(bulb_datagram)

        listener = _run_until_drained(fake_socket, registry)

        assert len(registry) == 1
        assert listener.datagrams_received == 3

    def test_repeated_announcement_updates_record(self, fake_socket, bulb_attributes):
        registry = DeviceRegistry()
        fake_socket.feed(build_datagram(bulb_attributes))
        fake_socket.feed(build_datagram(replace_attribute(bulb_attributes, "power", "off")))

        _run_until_drained(fake_socket, registry)

        assert len(registry) == 1
        assert registry.get("0x00000000124d7643").power == "off"

    def test_truncated_datagram_is_dropped(self, fake_socket, bulb_datagram):
        registry = DeviceRegistry()
        fake_socket.feed(bulb_datagram)

        _run_until_drained(fake_socket, registry, buffer_size=128)

        assert len(registry) == 0

    def test_header_block_mode(self, fake_socket, bulb_attributes):
        registry = DeviceRegistry()
        fake_socket.feed(build_datagram(bulb_attributes, headers=STATUS_AND_HEADERS[:2]))

        _run_until_drained(fake_socket, registry, parse_mode=ParseMode.HEADER_BLOCK)

        assert len(registry) == 1

    def test_timeout_keeps_listening(self, fake_socket, bulb_datagram):
        registry = DeviceRegistry()
        stop_event = threading.Event()
        listener = Listener(fake_socket, registry, stop_event)
        fake_socket.feed_error(socket.timeout("timed out"))
        fake_socket.feed(bulb_datagram)

        def stop_when_registered(_):
            stop_event.set()

        registry.on_device_found(stop_when_registered)
        listener.run()

        assert len(registry) == 1

    def test_receive_error_propagates(self, fake_socket):
        fake_socket.feed_error(OSError("Bad file descriptor"))
        listener = Listener(fake_socket, DeviceRegistry(), threading.Event())

        with pytest.raises(OSError, match="Bad file descriptor"):
            listener.run()

    def test_receive_error_after_cancel_exits_quietly(self, fake_socket):
        stop_event = threading.Event()

        class ClosingSocket(type(fake_socket)):
            def recvfrom(self, bufsize):
                stop_event.set()
                raise OSError("Bad file descriptor")

        listener = Listener(ClosingSocket(), DeviceRegistry(), stop_event)
        listener.run()

        assert stop_event.is_set()

    def test_does_not_receive_when_already_cancelled(self, fake_socket, bulb_datagram):
        stop_event = threading.Event()
        stop_event.set()
        fake_socket.feed(bulb_datagram)
        registry = DeviceRegistry()

        Listener(fake_socket, registry, stop_event).run()

        assert len(registry) == 0
