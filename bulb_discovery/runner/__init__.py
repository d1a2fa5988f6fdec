"""Runner module - discovery task orchestration."""

from .service import (
    DiscoveryResult,
    DiscoveryService,
    DiscoveryTransportError,
    default_socket_factory,
)

__all__ = [
    "DiscoveryResult",
    "DiscoveryService",
    "DiscoveryTransportError",
    "default_socket_factory",
]
