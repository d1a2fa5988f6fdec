"""Configuration data models for bulb discovery."""

from dataclasses import asdict, dataclass, field
from typing import Any

from ..discovery.announcement import ParseMode
from ..discovery.listener import DEFAULT_BUFFER_SIZE, DEFAULT_POLL_INTERVAL
from ..discovery.probe import (
    DEFAULT_DISCOVERY_PORT,
    DEFAULT_MULTICAST_GROUP,
    DEFAULT_SEARCH_INTERVAL_MS,
)


@dataclass
class DiscoveryConfig:
    """Settings for a discovery run."""
    debug: bool = False
    search_interval_ms: int = DEFAULT_SEARCH_INTERVAL_MS
    multicast_group: str = DEFAULT_MULTICAST_GROUP
    port: int = DEFAULT_DISCOVERY_PORT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    multicast_ttl: int = 1
    parse_mode: str = ParseMode.FIXED_OFFSET.value

    def __post_init__(self):
        if isinstance(self.parse_mode, ParseMode):
            self.parse_mode = self.parse_mode.value
        self.parse_mode = str(self.parse_mode).lower()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationError:
    """One problem with a config field, keyed by its YAML name."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ValidationResult:
    """Errors block a discovery run; warnings are only logged."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    def describe_errors(self) -> str:
        return "; ".join(str(e) for e in self.errors)
