# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Hierarchical configuration models for pySWATplus.

Settings are grouped into sections (``config.simulation.start_date`` vs the
flat ``START_DATE`` key) while keeping dict-like, flat access for code and
YAML files that use uppercase keys.

Key design features:
- Type-safe hierarchical structure
- Factory methods: from_file(), from_dict(), default()
- Flat access: to_dict(), get(), __getitem__()
- Immutable configs (frozen=True)
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .base import FROZEN_CONFIG
from .demo import DEFAULT_DEMO_URL, DemoConfig
from .simulation import OutputSpec, SimulationConfig
from .system import SystemConfig


class PySWATplusConfig(BaseModel):
    """Root configuration holding the system, simulation and demo sections."""
    model_config = FROZEN_CONFIG

    system: SystemConfig = Field(default_factory=SystemConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)

    @classmethod
    def from_file(cls, path: Path, overrides: Optional[Dict[str, Any]] = None,
                  *, use_env: bool = True) -> 'PySWATplusConfig':
        """Load configuration from a YAML file (flat or nested format)."""
        from ..loader import load_config
        return load_config(path, overrides=overrides, use_env=use_env)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'PySWATplusConfig':
        """Build a configuration from a flat (uppercase keys) or nested dict."""
        from ..loader import build_config
        return build_config(values)

    @classmethod
    def default(cls) -> 'PySWATplusConfig':
        """Configuration with every setting at its default."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Flatten all sections into a single dict keyed by uppercase aliases."""
        flat: Dict[str, Any] = {}
        for section in (self.system, self.simulation, self.demo):
            flat.update(section.model_dump(by_alias=True))
        return flat

    def get(self, key: str, default: Any = None) -> Any:
        return self.to_dict().get(key, default)

    def __getitem__(self, key: str) -> Any:
        flat = self.to_dict()
        if key not in flat:
            raise KeyError(key)
        return flat[key]


__all__ = [
    'PySWATplusConfig',
    'SystemConfig',
    'SimulationConfig',
    'OutputSpec',
    'DemoConfig',
    'DEFAULT_DEMO_URL',
    'FROZEN_CONFIG',
]
