# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Command handlers for the pySWATplus CLI.
"""

from .base import BaseCommand, cli_exception_handler
from .demo_commands import DemoCommands
from .plot_commands import PlotCommands
from .run_commands import RunCommands

__all__ = [
    'BaseCommand',
    'cli_exception_handler',
    'DemoCommands',
    'PlotCommands',
    'RunCommands',
]
