# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Plotting modules for pySWATplus reporting.
"""

from pyswatplus.reporting.plotters.spatial_plotter import SpatialPlotter
from pyswatplus.reporting.plotters.timeseries_plotter import TimeSeriesPlotter
from pyswatplus.reporting.plotters.water_balance_plotter import WaterBalancePlotter

__all__ = [
    'SpatialPlotter',
    'TimeSeriesPlotter',
    'WaterBalancePlotter',
]
