# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Plot command handlers for pySWATplus CLI.
"""

from argparse import Namespace
from pathlib import Path

import pandas as pd

from pyswatplus.core.exceptions import ValidationError
from pyswatplus.models.swatplus import load_swat_run
from pyswatplus.reporting import TimeSeriesPlotter, WaterBalancePlotter, water_balance_components

from ..exit_codes import ExitCode
from .base import BaseCommand, cli_exception_handler


class PlotCommands(BaseCommand):
    """Handlers for plot commands on saved runs."""

    @staticmethod
    @cli_exception_handler
    def timeseries(args: Namespace) -> int:
        """Execute: pyswatplus plot timeseries FILE --variable NAME --output HTML"""
        BaseCommand.setup_logging(args)
        result = load_swat_run(Path(args.file), variable=args.variable, run=args.run)
        sim = result.get(args.variable)
        if 'date' not in sim.columns:
            raise ValidationError(f"'{args.variable}' was saved without dates and cannot be plotted over time")

        obs = None
        if args.observation:
            obs = pd.read_csv(args.observation)
            obs = obs.rename(columns={obs.columns[0]: 'date'})
            obs['date'] = pd.to_datetime(obs['date'])

        plotter = TimeSeriesPlotter()
        fig = plotter.plot_timeseries(sim, obs=obs, title=args.title or args.variable)
        target = plotter.save_html(fig, Path(args.output))
        BaseCommand._console.success(f"Plot written to {target}")
        return ExitCode.SUCCESS

    @staticmethod
    @cli_exception_handler
    def water_balance(args: Namespace) -> int:
        """Execute: pyswatplus plot water-balance FILE --components A B ... --output HTML"""
        BaseCommand.setup_logging(args)
        result = load_swat_run(Path(args.file), variable=args.components, run=args.run)
        table = water_balance_components(result, args.components)

        plotter = WaterBalancePlotter()
        output = Path(args.output)
        if output.suffix.lower() == '.png':
            target = plotter.save_png(table, output)
        else:
            target = plotter.save_html(plotter.plot_components(table), output)
        BaseCommand._console.success(f"Plot written to {target}")
        return ExitCode.SUCCESS
