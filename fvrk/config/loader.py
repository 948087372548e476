"""
YAML configuration loader with validation.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Union
from dataclasses import fields, is_dataclass

from .schema import (
    SimulationConfig, GasConfig, NumericsConfig, StageConfig,
    IterationConfig, LoggingConfig,
    euler_upwind_preset, low_mach_preset, navier_stokes_preset,
)

SECTIONS = {
    'gas': GasConfig,
    'numerics': NumericsConfig,
    'stages': StageConfig,
    'iteration': IterationConfig,
    'logging': LoggingConfig,
}


def _merge_dict(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def _coerce_type(value, field_type):
    """Coerce value to the expected field type."""
    # Handle string representations of numbers (e.g., "1.716e-5")
    if field_type in (float, 'float') and isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    if field_type in (int, 'int') and isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return value
    if field_type in (bool, 'bool') and isinstance(value, str):
        return value.strip().lower() in ('y', 'yes', 'true', '1', 'on')
    return value


def _dict_to_dataclass(cls, data: dict):
    """Convert a flat dictionary to a dataclass instance."""
    if not is_dataclass(cls):
        return data

    field_types = {f.name: f.type for f in fields(cls)}
    kwargs = {}

    for key, value in data.items():
        if key not in field_types:
            continue  # Skip unknown fields
        kwargs[key] = _coerce_type(value, field_types[key])

    return cls(**kwargs)


def load_yaml(path: Union[str, Path]) -> SimulationConfig:
    """
    Load simulation configuration from a YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        SimulationConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return from_dict(data)


def from_dict(data: Dict[str, Any]) -> SimulationConfig:
    """
    Create SimulationConfig from a dictionary.

    Handles nested structures and applies defaults for missing values.
    """
    data = dict(data)

    # Check for preset
    preset = data.pop('preset', None)
    if preset:
        numerics_preset = {
            'euler-upwind': euler_upwind_preset(),
            'low-mach': low_mach_preset(),
            'navier-stokes': navier_stokes_preset(),
        }.get(preset)
        if numerics_preset:
            # Merge preset with any explicit numerics overrides
            numerics_data = data.get('numerics', {})
            preset_dict = {f.name: getattr(numerics_preset, f.name) for f in fields(NumericsConfig)}
            data['numerics'] = _merge_dict(preset_dict, numerics_data)

    config_dict = {}
    for name, cls in SECTIONS.items():
        if name in data and data[name] is not None:
            config_dict[name] = _dict_to_dataclass(cls, data[name])

    return SimulationConfig(**config_dict)


def save_yaml(config: SimulationConfig, path: Union[str, Path]) -> None:
    """Save configuration to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
