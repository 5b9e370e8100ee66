# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Time series plotter.

Interactive (plotly) and static (matplotlib) plots of simulated runs
against observations.
"""

from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import pandas as pd
from plotly import graph_objects as go

from pyswatplus.reporting.core.base_plotter import BasePlotter
from pyswatplus.reporting.processors import join_observation, select_runs

RANGE_BUTTONS = [
    dict(count=1, label='1m', step='month', stepmode='backward'),
    dict(count=6, label='6m', step='month', stepmode='backward'),
    dict(count=1, label='1y', step='year', stepmode='backward'),
    dict(step='all', label='all'),
]


class TimeSeriesPlotter(BasePlotter):
    """
    Plotter for simulated and observed time series.

    Handles:
    - Interactive comparison of runs with observations (range selector)
    - Static PNG export of the same comparison
    """

    def _prepare(
        self,
        sim: pd.DataFrame,
        obs: Optional[pd.DataFrame],
        runs: Optional[Sequence[Union[int, str]]],
    ) -> pd.DataFrame:
        self._require_columns(sim, ['date'], 'Time series plot')
        if obs is not None:
            return join_observation(sim, obs, run=runs)
        columns = select_runs(sim, runs)
        if 'obs' in sim.columns:
            columns.append('obs')
        return sim[['date'] + columns]

    def _colors(self, series: Sequence[str], colors: Optional[Dict[str, str]]) -> Dict[str, str]:
        mapping = {}
        run_i = 0
        for name in series:
            if colors and name in colors:
                mapping[name] = colors[name]
            elif name == 'obs':
                mapping[name] = self.plot_config.COLOR_OBSERVED
            else:
                mapping[name] = self.run_color(run_i)
                run_i += 1
        return mapping

    def plot_timeseries(
        self,
        sim: pd.DataFrame,
        obs: Optional[pd.DataFrame] = None,
        runs: Optional[Sequence[Union[int, str]]] = None,
        colors: Optional[Dict[str, str]] = None,
        title: Optional[str] = None,
        y_label: str = 'Discharge (m³/s)',
    ) -> go.Figure:
        """
        Interactive plot of simulated runs (and observations).

        Args:
            sim: Simulation table (date + run columns); may already contain
                an ``obs`` column
            obs: Observation table (date + value), joined if given
            runs: Runs to show (default: all)
            colors: Optional colour per column name
            title: Plot title
            y_label: Y axis label

        Returns:
            plotly Figure with a range selector and range slider
        """
        table = self._prepare(sim, obs, runs)
        series = [c for c in table.columns if c != 'date']
        palette = self._colors(series, colors)

        fig = go.Figure()
        for name in series:
            is_obs = name == 'obs'
            fig.add_trace(go.Scatter(
                x=table['date'],
                y=table[name],
                name=name,
                mode='lines',
                line=dict(
                    color=palette[name],
                    width=self.plot_config.LINE_WIDTH_OBSERVED if is_obs else self.plot_config.LINE_WIDTH_SIMULATED,
                ),
            ))

        fig.update_layout(
            title_text=title,
            xaxis_title='Date',
            yaxis_title=y_label,
            template=self.plot_config.PLOTLY_TEMPLATE,
            height=self.plot_config.PLOTLY_HEIGHT,
            hovermode='x unified',
            xaxis=dict(rangeselector=dict(buttons=RANGE_BUTTONS), type='date'),
        )
        fig.update_xaxes(rangeslider_visible=True)
        return fig

    def plot_static(
        self,
        sim: pd.DataFrame,
        output_file: Path,
        obs: Optional[pd.DataFrame] = None,
        runs: Optional[Sequence[Union[int, str]]] = None,
        title: Optional[str] = None,
        y_label: str = 'Discharge (m³/s)',
    ) -> str:
        """Save the run/observation comparison as a PNG and return its path."""
        table = self._prepare(sim, obs, runs)
        plt, mdates = self._setup_matplotlib()

        fig, ax = plt.subplots(figsize=self.plot_config.FIGURE_SIZE_WIDE)
        run_i = 0
        for name in [c for c in table.columns if c != 'date']:
            if name == 'obs':
                ax.plot(table['date'], table[name], label='Observed',
                        color=self.plot_config.COLOR_OBSERVED,
                        linewidth=self.plot_config.LINE_WIDTH_OBSERVED)
            else:
                ax.plot(table['date'], table[name], label=name,
                        color=self.run_color(run_i),
                        linewidth=self.plot_config.LINE_WIDTH_SIMULATED)
                run_i += 1

        ax.xaxis.set_major_formatter(mdates.DateFormatter('%Y-%m'))
        self._apply_standard_styling(ax, xlabel='Date', ylabel=y_label, title=title)
        fig.autofmt_xdate()
        return self._save_and_close(fig, output_file)
