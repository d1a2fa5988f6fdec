"""Discovery module - multicast probing and announcement parsing."""

from .announcement import (
    AnnouncementParseError,
    DeviceRecord,
    ParseMode,
    REQUIRED_KEYS,
    parse_announcement,
    parse_attribute_lines,
)
from .listener import Listener, create_discovery_socket, DEFAULT_BUFFER_SIZE
from .probe import (
    DEFAULT_DISCOVERY_PORT,
    DEFAULT_MULTICAST_GROUP,
    PROBE_MESSAGE,
    Prober,
    build_probe_message,
)

__all__ = [
    "AnnouncementParseError",
    "DeviceRecord",
    "ParseMode",
    "REQUIRED_KEYS",
    "parse_announcement",
    "parse_attribute_lines",
    "Listener",
    "create_discovery_socket",
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_DISCOVERY_PORT",
    "DEFAULT_MULTICAST_GROUP",
    "PROBE_MESSAGE",
    "Prober",
    "build_probe_message",
]
