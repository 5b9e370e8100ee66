# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Reporting configuration module.

Provides configuration classes and defaults for visualization.
"""

from .plot_config import DEFAULT_PLOT_CONFIG, PlotConfig

__all__ = ["PlotConfig", "DEFAULT_PLOT_CONFIG"]
