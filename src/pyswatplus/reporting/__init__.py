# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Reporting: reshaping simulation results and plotting them.
"""

from .config import DEFAULT_PLOT_CONFIG, PlotConfig
from .plotters import SpatialPlotter, TimeSeriesPlotter, WaterBalancePlotter
from .processors import (
    aggregate_by_unit,
    convert_discharge,
    join_observation,
    join_spatial,
    select_runs,
    to_long,
    unit_values,
    water_balance_components,
)

__all__ = [
    'PlotConfig',
    'DEFAULT_PLOT_CONFIG',
    'TimeSeriesPlotter',
    'WaterBalancePlotter',
    'SpatialPlotter',
    'aggregate_by_unit',
    'convert_discharge',
    'join_observation',
    'join_spatial',
    'select_runs',
    'to_long',
    'unit_values',
    'water_balance_components',
]
