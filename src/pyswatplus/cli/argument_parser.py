# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
pySWATplus CLI Argument Parser.

Commands:
    - demo: Download demo datasets
    - run: Run a SWAT+ project configured in a YAML file
    - scan: Summarise a saved run
    - plot: Plot a saved run (timeseries, water-balance)
"""

import argparse
from typing import List, Optional

from pyswatplus.data.demo import DATASET_ALIASES, DEMO_DATASETS
from pyswatplus.pyswatplus_version import __version__

DEMO_CHOICES = list(DEMO_DATASETS) + list(DATASET_ALIASES)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


class CLIParser:
    """
    Main CLI parser.

    Attributes:
        common_parser: Parent parser with global options (--config, --debug)
        parser: Main argument parser with all subcommands registered
    """

    def __init__(self):
        self.common_parser = self._create_common_parser()
        self.parser = self._create_parser()

    def _create_common_parser(self) -> argparse.ArgumentParser:
        """Create a parent parser with common arguments."""
        parser = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
        parser.add_argument('--config', type=str,
                            help='Path to a YAML configuration file')
        parser.add_argument('--debug', action='store_true',
                            help='Enable debug output')
        return parser

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='pyswatplus',
            description='pySWATplus - run and analyse SWAT+ projects',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            parents=[self.common_parser],
            epilog="""
Examples:
  pyswatplus demo project --path ./demo
  pyswatplus run --config swat_run.yaml
  pyswatplus scan ./demo/swat_run.nc
  pyswatplus plot timeseries ./demo/swat_run.nc --variable q_sim --output q.html
"""
        )
        parser.add_argument('--version', action='version', version=f'pySWATplus {__version__}')

        subparsers = parser.add_subparsers(dest='command', required=True,
                                           help='Command', metavar='<command>')
        self._register_demo_command(subparsers)
        self._register_run_commands(subparsers)
        self._register_plot_commands(subparsers)
        return parser

    def _register_demo_command(self, subparsers):
        from .commands import DemoCommands

        demo_parser = subparsers.add_parser(
            'demo', help='Download demo data', parents=[self.common_parser])
        demo_parser.add_argument('dataset', choices=DEMO_CHOICES, help='Demo dataset')
        demo_parser.add_argument('--path', type=str,
                                 help='Target folder (required for the project)')
        demo_parser.add_argument('--version', dest='version', type=str,
                                 help='SWAT+ revision of the demo set')
        demo_parser.set_defaults(func=DemoCommands.load)

    def _register_run_commands(self, subparsers):
        from .commands import RunCommands

        run_parser = subparsers.add_parser(
            'run', help='Run a configured SWAT+ project', parents=[self.common_parser])
        run_parser.add_argument('--n-thread', dest='n_thread', type=positive_int,
                                help='Number of parallel model runs')
        run_parser.add_argument('--save-file', dest='save_file', type=str,
                                help='Name of the result file')
        run_parser.set_defaults(func=RunCommands.run)

        scan_parser = subparsers.add_parser(
            'scan', help='Summarise a saved run', parents=[self.common_parser])
        scan_parser.add_argument('file', help='Saved run (NetCDF)')
        scan_parser.set_defaults(func=RunCommands.scan)

    def _register_plot_commands(self, subparsers):
        from .commands import PlotCommands

        plot_parser = subparsers.add_parser('plot', help='Plot a saved run')
        plot_subparsers = plot_parser.add_subparsers(dest='plot_type', required=True,
                                                     help='Plot type', metavar='<plot>')

        ts_parser = plot_subparsers.add_parser(
            'timeseries', help='Simulated runs and observations over time',
            parents=[self.common_parser])
        ts_parser.add_argument('file', help='Saved run (NetCDF)')
        ts_parser.add_argument('--variable', required=True, help='Output name to plot')
        ts_parser.add_argument('--observation', type=str,
                               help='CSV with date and observed values')
        ts_parser.add_argument('--run', type=positive_int, nargs='+', help='Runs to plot')
        ts_parser.add_argument('--title', type=str, help='Plot title')
        ts_parser.add_argument('--output', required=True, help='Target HTML file')
        ts_parser.set_defaults(func=PlotCommands.timeseries)

        wb_parser = plot_subparsers.add_parser(
            'water-balance', help='Water balance components per run',
            parents=[self.common_parser])
        wb_parser.add_argument('file', help='Saved run (NetCDF)')
        wb_parser.add_argument('--components', nargs='+', required=True,
                               help='Output names of the components')
        wb_parser.add_argument('--run', type=positive_int, nargs='+', help='Runs to include')
        wb_parser.add_argument('--output', required=True, help='Target HTML or PNG file')
        wb_parser.set_defaults(func=PlotCommands.water_balance)

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(args)
