# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Simulation command handlers for pySWATplus CLI.
"""

from argparse import Namespace
from pathlib import Path

from pyswatplus.core.exceptions import ConfigurationError
from pyswatplus.models.swatplus import define_output, run_swatplus, scan_swat_run

from ..exit_codes import ExitCode
from .base import BaseCommand, cli_exception_handler

DEFAULT_SAVE_FILE = 'swat_run.nc'


class RunCommands(BaseCommand):
    """Handlers for the run and scan commands."""

    @staticmethod
    @cli_exception_handler
    def run(args: Namespace) -> int:
        """
        Execute: pyswatplus run --config FILE

        Runs the project configured in FILE and saves the result. Outputs
        come from OUTPUTS, parameter sets from PARAMETERS.
        """
        config = BaseCommand.load_config(args, required=True)
        BaseCommand.setup_logging(args, config)
        sim = config.simulation

        if sim.project_path is None:
            raise ConfigurationError("PROJECT_PATH is not set in the configuration")
        if not sim.outputs:
            raise ConfigurationError("OUTPUTS must define at least one output")

        output = {
            label: define_output(entry.file, entry.variable, entry.unit)
            for label, entry in sim.outputs.items()
        }
        save_file = getattr(args, 'save_file', None) or sim.save_file or DEFAULT_SAVE_FILE
        save_path = sim.save_path or sim.project_path

        result = run_swatplus(
            sim.project_path,
            output,
            parameter=dict(sim.parameters) or None,
            start_date=sim.start_date,
            end_date=sim.end_date,
            years_skip=sim.years_skip,
            start_date_print=sim.start_date_print,
            output_interval=sim.output_interval,
            run_index=sim.run_index,
            run_path=sim.run_path,
            n_thread=getattr(args, 'n_thread', None) or config.system.n_thread,
            save_path=save_path,
            save_file=save_file,
            add_date=sim.add_date,
            refresh=sim.refresh,
            keep_folder=sim.keep_folder,
            quiet=sim.quiet,
            config=config,
        )

        n_errors = 0 if result.error_report is None else len(result.error_report)
        BaseCommand._console.success(
            f"{len(result.runs)} run(s) saved to {Path(save_path) / save_file}"
            + (f", {n_errors} failed" if n_errors else '')
        )
        return ExitCode.SUCCESS

    @staticmethod
    @cli_exception_handler
    def scan(args: Namespace) -> int:
        """Execute: pyswatplus scan FILE"""
        BaseCommand.setup_logging(args)
        summary = scan_swat_run(Path(args.file))
        out = BaseCommand._console
        out.info(f"File:       {summary['file']}")
        out.info(f"Variables:  {', '.join(summary['variables'])}")
        out.info(f"Runs:       {summary['n_runs']}")
        if summary['date_start']:
            out.info(f"Period:     {summary['date_start']} - {summary['date_end']}")
        out.info(f"Parameters: {', '.join(summary['parameters']) or '-'}")
        out.info(f"Failed:     {summary['n_errors']}")
        return ExitCode.SUCCESS
