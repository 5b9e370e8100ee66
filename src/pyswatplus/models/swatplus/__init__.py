# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
SWAT+ model support.

Output and parameter definitions, the TxtInOut file writers, the threaded
runner and persistence of run results.
"""

from .output_definition import OutputDefinition, define_output, format_output_definitions
from .parameters import ParameterSet, format_parameters, parse_parameter_name
from .results import SwatRunResult, load_swat_run, save_swat_run, scan_swat_run
from .runner import SWATplusRunner, run_swatplus
from .txtinout import ModelSettings, resolve_model_settings

__all__ = [
    'OutputDefinition',
    'define_output',
    'format_output_definitions',
    'ParameterSet',
    'format_parameters',
    'parse_parameter_name',
    'ModelSettings',
    'resolve_model_settings',
    'SWATplusRunner',
    'run_swatplus',
    'SwatRunResult',
    'save_swat_run',
    'load_swat_run',
    'scan_swat_run',
]
