"""Bulb announcement parsing.

Devices answer a probe (or announce unsolicited) with an HTTP-like text
datagram:

    HTTP/1.1 200 OK
    Cache-Control: max-age=3600
    Date:
    Ext:
    Location: yeelight://192.168.1.9:55443
    Server: POSIX UPnP/1.0 YGLC/1
    id: 0x00000000124d7643
    ...

Every line after the fixed header block is a ``key: value`` attribute.
"""

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterable, Optional
from urllib.parse import urlsplit


# Lines before the attribute block in FIXED_OFFSET mode (status + 3 headers)
FIXED_HEADER_LINES = 4

REQUIRED_KEYS = (
    "location",
    "server",
    "id",
    "model",
    "fw_ver",
    "support",
    "power",
    "bright",
    "color_mode",
    "ct",
    "rgb",
    "hue",
    "sat",
    "name",
)

INTEGER_KEYS = ("ct", "rgb", "hue", "sat")

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1


class ParseMode(str, Enum):
    """How attribute lines are located inside a response payload."""
    FIXED_OFFSET = "fixed-offset"
    HEADER_BLOCK = "header-block"


VALID_PARSE_MODES = {m.value for m in ParseMode}


class AnnouncementParseError(ValueError):
    """Raised when a payload is not a complete, well-formed announcement."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


@dataclass(frozen=True)
class DeviceRecord:
    """A discovered bulb as of its last successful announcement.

    All string values are lower-cased by the parser, so comparisons must
    use lower-case literals (``record.power == "on"``).
    """
    id: str
    location: str
    server: str
    model: str
    firmware_version: str
    supported_commands: tuple[str, ...]
    power: str
    brightness: str
    color_mode: str
    color_temperature: int
    rgb: int
    hue: int
    saturation: int
    name: str

    @property
    def host(self) -> Optional[str]:
        """Host part of the control endpoint, if the location is a URI."""
        return urlsplit(self.location).hostname

    @property
    def port(self) -> Optional[int]:
        """Port of the control endpoint, if present and valid."""
        try:
            return urlsplit(self.location).port
        except ValueError:
            return None

    def supports(self, command: str) -> bool:
        return command.lower() in self.supported_commands

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["supported_commands"] = list(self.supported_commands)
        return data

    def __str__(self) -> str:
        label = self.name or self.id
        return f"{label} ({self.model}) at {self.location}"


def parse_announcement(
    raw: str, mode: ParseMode = ParseMode.FIXED_OFFSET
) -> DeviceRecord:
    """Parse a raw response payload into a DeviceRecord.

    Args:
        raw: Decoded datagram text.
        mode: FIXED_OFFSET drops the first 4 lines and the last line, which
            matches the header shape bulbs send today. HEADER_BLOCK skips the
            status line and reads attributes up to the first blank line, so
            it tolerates a different number of protocol headers.

    Returns:
        The parsed record.

    Raises:
        AnnouncementParseError: If any required attribute is missing or an
            integer attribute is malformed.
    """
    mode = ParseMode(mode)
    lines = raw.split("\n")

    if mode is ParseMode.FIXED_OFFSET:
        return parse_attribute_lines(lines[FIXED_HEADER_LINES:-1])

    attribute_lines = []
    for line in lines[1:]:
        line = line.rstrip("\r")
        if not line.strip():
            break
        if ":" in line:
            attribute_lines.append(line)

    return parse_attribute_lines(attribute_lines)


def parse_attribute_lines(lines: Iterable[str]) -> DeviceRecord:
    """Build a DeviceRecord from already isolated ``key: value`` lines.

    Keys and values are trimmed and lower-cased; a repeated key keeps its
    last value. A line without a colon is used as both key and value.
    """
    attributes: dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition(":")
        if not sep:
            value = key
        attributes[key.strip().lower()] = value.strip().lower()

    for key in REQUIRED_KEYS:
        if key not in attributes:
            raise AnnouncementParseError(key, "missing attribute")

    return DeviceRecord(
        id=attributes["id"],
        location=attributes["location"],
        server=attributes["server"],
        model=attributes["model"],
        firmware_version=attributes["fw_ver"],
        supported_commands=tuple(attributes["support"].split(" ")),
        power=attributes["power"],
        brightness=attributes["bright"],
        color_mode=attributes["color_mode"],
        color_temperature=_parse_int(attributes, "ct"),
        rgb=_parse_int(attributes, "rgb"),
        hue=_parse_int(attributes, "hue"),
        saturation=_parse_int(attributes, "sat"),
        name=attributes["name"],
    )


def _parse_int(attributes: dict[str, str], key: str) -> int:
    """Parse a signed 32-bit decimal integer attribute."""
    value = attributes[key]
    if not _INT_PATTERN.fullmatch(value):
        raise AnnouncementParseError(key, f"not an integer: {value!r}")

    number = int(value)
    if not _INT_MIN <= number <= _INT_MAX:
        raise AnnouncementParseError(key, f"out of range: {value!r}")
    return number
