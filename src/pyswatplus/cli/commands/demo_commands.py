# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Demo data command handlers for pySWATplus CLI.
"""

from argparse import Namespace
from pathlib import Path

from pyswatplus.data.demo import load_demo

from ..exit_codes import ExitCode
from .base import BaseCommand, cli_exception_handler


class DemoCommands(BaseCommand):
    """Handlers for the demo command."""

    @staticmethod
    @cli_exception_handler
    def load(args: Namespace) -> int:
        """
        Execute: pyswatplus demo DATASET [--path PATH]

        Downloads a demo dataset. The project is extracted below --path;
        observations and layers are written to --path when it is given and
        summarised otherwise.
        """
        config = BaseCommand.load_config(args)
        BaseCommand.setup_logging(args, config)

        dataset = args.dataset
        path = Path(args.path) if getattr(args, 'path', None) else None
        data = load_demo(dataset, path=path, version=getattr(args, 'version', None), config=config)

        if isinstance(data, Path):
            BaseCommand._console.success(f"Demo project available in {data}")
            return ExitCode.SUCCESS

        BaseCommand._console.info(f"{dataset}: {len(data)} records, columns {list(data.columns)}")
        if path is not None:
            path.mkdir(parents=True, exist_ok=True)
            if hasattr(data, 'geometry'):
                target = path / f"{dataset}.gpkg"
                data.to_file(target, driver='GPKG')
            else:
                target = path / f"{dataset}.csv"
                data.to_csv(target, index=False)
            BaseCommand._console.success(f"Saved {dataset} to {target}")
        return ExitCode.SUCCESS
