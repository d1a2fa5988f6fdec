"""YAML config loader for bulb discovery.

Parses YAML config files into DiscoveryConfig objects.
"""

from pathlib import Path
from typing import Union

import yaml

from .schema import DiscoveryConfig


def load_config(file_path: Union[str, Path]) -> DiscoveryConfig:
    """Load a YAML config file into a DiscoveryConfig.

    Args:
        file_path: Path to the YAML config file.

    Returns:
        Parsed DiscoveryConfig. Keys absent from the file keep their defaults.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the YAML is malformed or not a mapping.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise ValueError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML in {file_path}: {e}") from e

    if data is None:
        return DiscoveryConfig()

    return load_config_data(data, source=str(file_path))


def load_config_data(data: dict, source: str = "<inline>") -> DiscoveryConfig:
    """Build a DiscoveryConfig from a dictionary (already loaded YAML).

    Unknown keys are ignored. Hyphenated keys (``search-interval-ms``) are
    accepted as well as underscored ones.

    Raises:
        ValueError: If ``data`` is not a mapping.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a YAML mapping, got {type(data).__name__} in {source}")

    normalized = {str(k).replace("-", "_"): v for k, v in data.items()}
    return DiscoveryConfig(**{
        k: v for k, v in normalized.items()
        if k in DiscoveryConfig.__dataclass_fields__
    })


def apply_overrides(config: DiscoveryConfig, **overrides) -> DiscoveryConfig:
    """Return ``config`` with every non-None override applied."""
    values = config.to_dict()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return DiscoveryConfig(**values)
