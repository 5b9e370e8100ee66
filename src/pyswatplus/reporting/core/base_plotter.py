# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Base class for pySWATplus plotters.

Provides matplotlib setup for headless PNG export, the shared axis styling
and column checks raising ReportingError.
"""

from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from pyswatplus.core.exceptions import ReportingError
from pyswatplus.core.mixins import LoggingMixin
from pyswatplus.reporting.config import DEFAULT_PLOT_CONFIG, PlotConfig


class BasePlotter(LoggingMixin):
    """
    Shared helpers for plotters.

    Args:
        plot_config: Styling constants (default: DEFAULT_PLOT_CONFIG)
        logger: Optional logger instance
    """

    def __init__(self, plot_config: Optional[PlotConfig] = None, logger=None):
        self.plot_config = plot_config or DEFAULT_PLOT_CONFIG
        if logger is not None:
            self.logger = logger

    def _setup_matplotlib(self):
        """Import pyplot with a non-interactive backend."""
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.dates as mdates
        import matplotlib.pyplot as plt
        return plt, mdates

    def _apply_standard_styling(
        self,
        ax,
        xlabel: Optional[str] = None,
        ylabel: Optional[str] = None,
        title: Optional[str] = None,
        legend: bool = True,
        legend_loc: str = 'best',
    ) -> None:
        if xlabel:
            ax.set_xlabel(xlabel, fontsize=self.plot_config.FONT_SIZE_LABEL)
        if ylabel:
            ax.set_ylabel(ylabel, fontsize=self.plot_config.FONT_SIZE_LABEL)
        if title:
            ax.set_title(title, fontsize=self.plot_config.FONT_SIZE_TITLE)
        ax.grid(True, alpha=self.plot_config.GRID_ALPHA)
        if legend:
            ax.legend(loc=legend_loc)

    def _save_and_close(self, fig, output_file: Path) -> str:
        """Save a matplotlib figure and release it."""
        import matplotlib.pyplot as plt

        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_file, dpi=self.plot_config.DPI, bbox_inches='tight')
        plt.close(fig)
        self.logger.info(f"Plot saved to {output_file}")
        return str(output_file)

    def save_html(self, figure, output_file: Path) -> str:
        """Write an interactive figure (plotly Figure or folium Map) to HTML."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        if hasattr(figure, 'write_html'):
            figure.write_html(str(output_file), include_plotlyjs='cdn')
        else:
            figure.save(str(output_file))
        self.logger.info(f"Interactive plot saved to {output_file}")
        return str(output_file)

    def run_color(self, i: int) -> str:
        palette = self.plot_config.RUN_PALETTE
        return palette[i % len(palette)]

    @staticmethod
    def _require_columns(df: pd.DataFrame, columns: Iterable[str], context: str) -> None:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ReportingError(
                f"{context}: missing columns {missing}. Available: {list(df.columns)}"
            )
        if df.empty:
            raise ReportingError(f"{context}: no data to plot")
