"""Config validator for bulb discovery.

Checks a DiscoveryConfig against the limits the socket and the protocol
impose.
"""

import ipaddress

from ..discovery.announcement import VALID_PARSE_MODES
from .schema import DiscoveryConfig, ValidationError, ValidationResult

# Probing faster than this mostly produces duplicate responses
MIN_RECOMMENDED_INTERVAL_MS = 500

# Typical announcements are ~500 bytes; smaller buffers truncate them
MIN_RECOMMENDED_BUFFER_SIZE = 512


def validate_config(config: DiscoveryConfig) -> ValidationResult:
    """Validate a DiscoveryConfig.

    Args:
        config: Config to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if not isinstance(config.debug, bool):
        errors.append(ValidationError(
            path="debug",
            message=f"'debug' must be true or false, got {config.debug!r}.",
        ))

    _validate_probe(config, errors, warnings)
    _validate_receive(config, errors, warnings)

    if config.parse_mode not in VALID_PARSE_MODES:
        errors.append(ValidationError(
            path="parse_mode",
            message=f"Invalid parse mode '{config.parse_mode}'. Must be one of: {', '.join(sorted(VALID_PARSE_MODES))}",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_probe(
    config: DiscoveryConfig,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate probe destination and cadence."""
    if not _is_int(config.search_interval_ms) or config.search_interval_ms <= 0:
        errors.append(ValidationError(
            path="search_interval_ms",
            message=f"Search interval must be a positive integer, got {config.search_interval_ms!r}.",
        ))
    elif config.search_interval_ms < MIN_RECOMMENDED_INTERVAL_MS:
        warnings.append(ValidationError(
            path="search_interval_ms",
            message=f"Search interval {config.search_interval_ms} ms is very short.",
            severity="warning",
        ))

    try:
        group = ipaddress.IPv4Address(config.multicast_group)
    except ValueError:
        errors.append(ValidationError(
            path="multicast_group",
            message=f"Invalid IPv4 address '{config.multicast_group}'.",
        ))
    else:
        if not group.is_multicast:
            errors.append(ValidationError(
                path="multicast_group",
                message=f"'{config.multicast_group}' is not a multicast address.",
            ))

    if not _is_int(config.port) or not 0 < config.port < 65536:
        errors.append(ValidationError(
            path="port",
            message=f"Port must be between 1 and 65535, got {config.port!r}.",
        ))

    if not _is_int(config.multicast_ttl) or not 0 <= config.multicast_ttl <= 255:
        errors.append(ValidationError(
            path="multicast_ttl",
            message=f"Multicast TTL must be between 0 and 255, got {config.multicast_ttl!r}.",
        ))


def _validate_receive(
    config: DiscoveryConfig,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate receive buffer and polling."""
    if not _is_int(config.buffer_size) or config.buffer_size <= 0:
        errors.append(ValidationError(
            path="buffer_size",
            message=f"Buffer size must be a positive integer, got {config.buffer_size!r}.",
        ))
    elif config.buffer_size < MIN_RECOMMENDED_BUFFER_SIZE:
        warnings.append(ValidationError(
            path="buffer_size",
            message=f"Buffer size {config.buffer_size} may truncate announcements.",
            severity="warning",
        ))

    if (
        isinstance(config.poll_interval, bool)
        or not isinstance(config.poll_interval, (int, float))
        or config.poll_interval <= 0
    ):
        errors.append(ValidationError(
            path="poll_interval",
            message=f"Poll interval must be a positive number of seconds, got {config.poll_interval!r}.",
        ))
