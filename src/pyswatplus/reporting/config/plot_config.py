# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Plot styling shared by all plotters.

Matplotlib settings (figure sizes, DPI, fonts) apply to the static PNG
exports, the plotly and folium settings to the interactive figures.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class PlotConfig:
    """Styling constants for pySWATplus figures."""

    # Matplotlib
    FIGURE_SIZE_SMALL: Tuple[float, float] = (8, 5)
    FIGURE_SIZE_MEDIUM: Tuple[float, float] = (12, 6)
    FIGURE_SIZE_WIDE: Tuple[float, float] = (16, 6)
    DPI: int = 300
    FONT_SIZE_TITLE: int = 14
    FONT_SIZE_LABEL: int = 11
    GRID_ALPHA: float = 0.3
    LINE_WIDTH_OBSERVED: float = 1.5
    LINE_WIDTH_SIMULATED: float = 1.0

    # Colours: observation first, runs cycle through the palette
    COLOR_OBSERVED: str = 'black'
    RUN_PALETTE: List[str] = field(default_factory=lambda: [
        '#1b9e77', '#d95f02', '#7570b3', '#e7298a',
        '#66a61e', '#e6ab02', '#a6761d', '#666666',
    ])

    # Plotly
    PLOTLY_TEMPLATE: str = 'plotly_white'
    PLOTLY_HEIGHT: int = 500

    # Folium
    MAP_TILES: str = 'CartoDB positron'
    MAP_ZOOM_START: int = 11
    MAP_COLORMAP: str = 'YlGnBu'
    MAP_FILL_OPACITY: float = 0.7
    MAP_LINE_OPACITY: float = 0.3


DEFAULT_PLOT_CONFIG = PlotConfig()
