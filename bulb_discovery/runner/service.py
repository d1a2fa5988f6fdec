"""Discovery service - runs the prober and the listener.

Coordinates a discovery run:
1. Open the shared multicast socket
2. Start the probe task (sends M-SEARCH every interval)
3. Start the listen task (parses announcements into the registry)
4. Wait for the run duration, a stop request or a task failure
5. Stop both tasks and close the socket

A transport failure in either task is fatal: it cancels the other task and
is re-raised from :meth:`DiscoveryService.join`.
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..config.schema import DiscoveryConfig
from ..discovery.announcement import DeviceRecord
from ..discovery.listener import Listener, create_discovery_socket
from ..discovery.probe import Prober
from ..registry import DeviceRegistry

_LOGGER = logging.getLogger(__name__)

SocketFactory = Callable[[DiscoveryConfig], socket.socket]


class DiscoveryTransportError(ConnectionError):
    """A probe or listen task died on a socket error."""

    def __init__(self, task: str, cause: BaseException):
        super().__init__(f"{task} task failed: {cause}")
        self.task = task


def default_socket_factory(config: DiscoveryConfig) -> socket.socket:
    return create_discovery_socket(
        poll_interval=config.poll_interval, ttl=config.multicast_ttl
    )


@dataclass
class DiscoveryResult:
    """Outcome of a finished discovery run."""
    devices: dict[str, DeviceRecord] = field(default_factory=dict)
    probes_sent: int = 0
    datagrams_received: int = 0
    duration_ms: int = 0

    @property
    def device_count(self) -> int:
        return len(self.devices)


class DiscoveryService:
    """Owns the shared socket, the registry and both discovery tasks."""

    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        registry: Optional[DeviceRegistry] = None,
        socket_factory: SocketFactory = default_socket_factory,
    ):
        """Initialize discovery service.

        Args:
            config: Discovery settings. Default: DiscoveryConfig().
            registry: Registry to fill. Default: a new DeviceRegistry.
            socket_factory: Builds the shared UDP socket from the config.
        """
        self.config = config or DiscoveryConfig()
        self.registry = registry if registry is not None else DeviceRegistry()
        self._socket_factory = socket_factory
        self._stop_event = threading.Event()
        self._sock: Optional[socket.socket] = None
        self._threads: list[threading.Thread] = []
        self._prober: Optional[Prober] = None
        self._listener: Optional[Listener] = None
        self._errors: list[Exception] = []
        self._errors_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    @property
    def probes_sent(self) -> int:
        return self._prober.probes_sent if self._prober else 0

    @property
    def datagrams_received(self) -> int:
        return self._listener.datagrams_received if self._listener else 0

    @property
    def errors(self) -> list[Exception]:
        with self._errors_lock:
            return list(self._errors)

    def start(self) -> None:
        """Open the socket and start the probe and listen tasks.

        Raises:
            RuntimeError: If the service is already running.
            OSError: If the socket cannot be created.
        """
        if self._threads:
            raise RuntimeError("Discovery service already started")

        self._stop_event.clear()
        with self._errors_lock:
            self._errors.clear()
        self._sock = self._socket_factory(self.config)
        self._prober = Prober(
            self._sock,
            self._stop_event,
            group=self.config.multicast_group,
            port=self.config.port,
        )
        self._listener = Listener(
            self._sock,
            self.registry,
            self._stop_event,
            buffer_size=self.config.buffer_size,
            parse_mode=self.config.parse_mode,
        )

        self._threads = [
            threading.Thread(
                target=self._run_task,
                args=("probe", lambda: self._prober.run(self.config.search_interval_ms)),
                name="bulb-prober",
                daemon=True,
            ),
            threading.Thread(
                target=self._run_task,
                args=("listen", self._listener.run),
                name="bulb-listener",
                daemon=True,
            ),
        ]
        for thread in self._threads:
            thread.start()

        _LOGGER.debug(
            "Discovery started on %s:%s every %s ms",
            self.config.multicast_group,
            self.config.port,
            self.config.search_interval_ms,
        )

    def stop(self) -> None:
        """Signal both tasks to stop."""
        self._stop_event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stopped or a task fails. Returns True if stopped."""
        return self._stop_event.wait(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for both tasks, close the socket and surface task failures.

        Raises:
            DiscoveryTransportError: If a task died on a socket error.
        """
        for thread in self._threads:
            thread.join(timeout)

        if not self.running:
            self._threads = []
            if self._sock is not None:
                self._sock.close()
                self._sock = None
            _LOGGER.debug("Discovery stopped")

        errors = self.errors
        if errors:
            raise errors[0]

    def run(self, duration: Optional[float] = None) -> DiscoveryResult:
        """Run discovery for ``duration`` seconds, or until stopped.

        Returns:
            DiscoveryResult with the registry snapshot.

        Raises:
            DiscoveryTransportError: If a task died on a socket error.
        """
        start_time = time.time()
        self.start()
        try:
            self.wait(duration)
        finally:
            self.stop()
            self.join()

        return DiscoveryResult(
            devices=self.registry.snapshot(),
            probes_sent=self.probes_sent,
            datagrams_received=self.datagrams_received,
            duration_ms=int((time.time() - start_time) * 1000),
        )

    def _run_task(self, name: str, target: Callable[[], None]) -> None:
        """Run one task; any socket error cancels the whole service."""
        try:
            target()
        except OSError as e:
            _LOGGER.error("Discovery %s task failed: %s", name, e)
            error = DiscoveryTransportError(name, e)
            error.__cause__ = e
            self._fail(error)
        except Exception as e:
            _LOGGER.exception("Discovery %s task crashed", name)
            self._fail(e)

    def _fail(self, error: Exception) -> None:
        with self._errors_lock:
            self._errors.append(error)
        self._stop_event.set()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()
        self.join()
