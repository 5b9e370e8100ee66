# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Water balance plotter.

Stacked bars of water balance components per simulation run.
"""

from pathlib import Path
from typing import Optional

import pandas as pd
from plotly import graph_objects as go

from pyswatplus.reporting.core.base_plotter import BasePlotter

LONG_COLUMNS = ['run', 'component', 'value']


class WaterBalancePlotter(BasePlotter):
    """Plotter for the composition of the water balance of each run."""

    def _pivot(self, long_table: pd.DataFrame) -> pd.DataFrame:
        self._require_columns(long_table, LONG_COLUMNS, 'Water balance plot')
        return long_table.pivot_table(index='run', columns='component', values='value',
                                      aggfunc='mean', sort=False)

    def plot_components(
        self,
        long_table: pd.DataFrame,
        title: Optional[str] = 'Water balance components',
        y_label: str = 'mm',
    ) -> go.Figure:
        """
        Stacked bar chart with one bar per run and one segment per component.

        Args:
            long_table: DataFrame(run, component, value), e.g. from
                water_balance_components()
        """
        wide = self._pivot(long_table)
        fig = go.Figure()
        for i, component in enumerate(wide.columns):
            fig.add_trace(go.Bar(
                x=list(wide.index),
                y=wide[component],
                name=str(component),
                marker=dict(color=self.run_color(i)),
            ))
        fig.update_layout(
            barmode='stack',
            title_text=title,
            xaxis_title='Run',
            yaxis_title=y_label,
            template=self.plot_config.PLOTLY_TEMPLATE,
            height=self.plot_config.PLOTLY_HEIGHT,
        )
        return fig

    def save_png(
        self,
        long_table: pd.DataFrame,
        output_file: Path,
        title: Optional[str] = 'Water balance components',
        y_label: str = 'mm',
    ) -> str:
        """Matplotlib version of plot_components saved as PNG."""
        wide = self._pivot(long_table)
        plt, _ = self._setup_matplotlib()

        fig, ax = plt.subplots(figsize=self.plot_config.FIGURE_SIZE_MEDIUM)
        wide.plot(kind='bar', stacked=True, ax=ax,
                  color=[self.run_color(i) for i in range(len(wide.columns))])
        self._apply_standard_styling(ax, xlabel='Run', ylabel=y_label, title=title,
                                     legend=True, legend_loc='upper left')
        ax.legend(title='Component', bbox_to_anchor=(1.02, 1), loc='upper left')
        plt.xticks(rotation=45, ha='right')
        plt.tight_layout()
        return self._save_and_close(fig, output_file)
