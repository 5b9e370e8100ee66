# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Configuration loading.

Loading precedence (highest to lowest):
1. Programmatic overrides
2. Environment variables (PYSWATPLUS_*)
3. Config file (YAML)
4. Defaults from the nested Pydantic models

Both the flat format (uppercase keys like ``START_DATE``) and the nested
format (``simulation: {start_date: ...}``) are accepted.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Set, Type

import yaml
from pydantic import AliasChoices, BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigurationError
from .models import DemoConfig, PySWATplusConfig, SimulationConfig, SystemConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = 'PYSWATPLUS_'

SECTIONS: Dict[str, Type[BaseModel]] = {
    'system': SystemConfig,
    'simulation': SimulationConfig,
    'demo': DemoConfig,
}


def _accepted_keys(model: Type[BaseModel]) -> Dict[str, str]:
    """Map every accepted flat key of *model* to its field name."""
    keys: Dict[str, str] = {}
    for name, field in model.model_fields.items():
        keys[name.upper()] = name
        if field.alias:
            keys[field.alias.upper()] = name
        if isinstance(field.validation_alias, AliasChoices):
            for choice in field.validation_alias.choices:
                if isinstance(choice, str):
                    keys[choice.upper()] = name
        elif isinstance(field.validation_alias, str):
            keys[field.validation_alias.upper()] = name
    return keys


def _is_nested_config(values: Dict[str, Any]) -> bool:
    return any(str(k).lower() in SECTIONS and isinstance(v, dict) for k, v in values.items())


def _flat_to_nested(values: Dict[str, Any], preferred: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Route flat keys to their section; *preferred* is tried first."""
    nested: Dict[str, Dict[str, Any]] = {name: {} for name in SECTIONS}
    order = list(SECTIONS)
    if preferred in SECTIONS:
        order.remove(preferred)
        order.insert(0, preferred)

    unknown: Set[str] = set()
    for key, value in values.items():
        key_upper = str(key).upper()
        for section in order:
            field_name = _accepted_keys(SECTIONS[section]).get(key_upper)
            if field_name is not None:
                nested[section][field_name] = value
                break
        else:
            unknown.add(str(key))
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")
    return nested


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _normalize(values: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Bring flat or nested input into the nested form keyed by field names."""
    if not values:
        return {name: {} for name in SECTIONS}
    if _is_nested_config(values):
        nested: Dict[str, Dict[str, Any]] = {name: {} for name in SECTIONS}
        for key, value in values.items():
            section = str(key).lower()
            if section in SECTIONS and isinstance(value, dict):
                routed = _flat_to_nested(value, preferred=section)
            else:
                routed = _flat_to_nested({key: value})
            for name, section_values in routed.items():
                nested[name].update(section_values)
        return nested
    return _flat_to_nested(values)


def _load_env_overrides() -> Dict[str, Any]:
    """Collect PYSWATPLUS_* environment variables as flat config keys."""
    overrides = {}
    for key, raw in os.environ.items():
        if key.startswith(ENV_PREFIX):
            overrides[key[len(ENV_PREFIX):]] = yaml.safe_load(raw) if raw else raw
    return overrides


def _format_validation_error(error: PydanticValidationError) -> str:
    lines = []
    for err in error.errors():
        location = '.'.join(str(part) for part in err.get('loc', ()))
        lines.append(f"  {location}: {err.get('msg')}")
    return "Invalid configuration:\n" + "\n".join(lines)


def build_config(values: Optional[Dict[str, Any]] = None) -> PySWATplusConfig:
    """Validate *values* (flat or nested) into a PySWATplusConfig.

    Raises:
        ConfigurationError: If validation fails
    """
    nested = _normalize(values or {})
    try:
        return PySWATplusConfig(
            system=SystemConfig(**nested['system']),
            simulation=SimulationConfig(**nested['simulation']),
            demo=DemoConfig(**nested['demo']),
        )
    except PydanticValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e


def load_config(
    path: Path,
    overrides: Optional[Dict[str, Any]] = None,
    *,
    use_env: bool = True,
) -> PySWATplusConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to configuration YAML file
        overrides: Programmatic overrides (flat or nested)
        use_env: Whether to apply PYSWATPLUS_* environment variables

    Returns:
        Validated PySWATplusConfig instance

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            file_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse configuration file {path}: {e}") from e

    if not isinstance(file_config, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    nested = _normalize(file_config)
    if use_env:
        env_overrides = _load_env_overrides()
        if env_overrides:
            nested = _deep_merge(nested, _normalize(env_overrides))
    if overrides:
        nested = _deep_merge(nested, _normalize(overrides))

    config = build_config(nested)
    logger.debug(f"Loaded configuration from {path}")
    return config
