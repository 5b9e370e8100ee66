# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Configuration models and loading for pySWATplus."""

from .loader import build_config, load_config
from .models import (
    DemoConfig,
    OutputSpec,
    PySWATplusConfig,
    SimulationConfig,
    SystemConfig,
)

__all__ = [
    'PySWATplusConfig',
    'SystemConfig',
    'SimulationConfig',
    'OutputSpec',
    'DemoConfig',
    'build_config',
    'load_config',
]
