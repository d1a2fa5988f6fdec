"""Config module - YAML settings loading and validation."""

from .schema import DiscoveryConfig, ValidationError, ValidationResult
from .loader import apply_overrides, load_config, load_config_data
from .validator import validate_config

__all__ = [
    "DiscoveryConfig",
    "ValidationError",
    "ValidationResult",
    "apply_overrides",
    "load_config",
    "load_config_data",
    "validate_config",
]
