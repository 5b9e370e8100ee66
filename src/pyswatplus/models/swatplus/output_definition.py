# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Definition of the SWAT+ output variables collected from a simulation.

An output is identified by the SWAT+ output object (the file name without
its interval suffix, e.g. ``channel_sd`` for ``channel_sd_day.txt``), the
variable column (``flo_out``) and the spatial units (the ``unit`` column of
the output table). Several definitions are combined into a mapping
``{label: OutputDefinition}``; a definition with more than one unit yields
one result table per unit named ``<label>_<unit>``.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Tuple, Union

import pandas as pd

from pyswatplus.core.exceptions import OutputDefinitionError

from .utils import parse_integer_values

OUTPUT_TABLE_COLUMNS = ['label', 'file', 'variable', 'unit', 'name']


@dataclass(frozen=True)
class OutputDefinition:
    """One requested SWAT+ output variable."""
    file: str
    variable: str
    unit: Tuple[int, ...] = (1,)


def define_output(
    file: str,
    variable: str,
    unit: Union[int, str, Iterable[int]] = 1,
) -> OutputDefinition:
    """
    Define a SWAT+ output variable to return from a simulation run.

    Args:
        file: SWAT+ output object, e.g. 'channel_sd', 'basin_wb', 'hru_wb'.
            A trailing interval suffix ('_day', '_mon', '_yr', '_aa') and a
            '.txt' extension are removed.
        variable: Column name of the variable in the output table
        unit: Spatial unit id(s): an int, an iterable of ints or a range
            string such as '1:3,5'

    Returns:
        OutputDefinition

    Raises:
        OutputDefinitionError: If names are empty or units are invalid

    Example:
        >>> define_output('channel_sd', 'flo_out', 1)
        OutputDefinition(file='channel_sd', variable='flo_out', unit=(1,))
    """
    file = _clean_file_name(file)
    if not isinstance(variable, str) or not variable.strip():
        raise OutputDefinitionError("Output variable name must be a non-empty string")

    try:
        units = parse_integer_values(unit, allow_duplicates=False)
    except (TypeError, ValueError) as e:
        raise OutputDefinitionError(f"Invalid units for output '{variable}': {e}") from e

    if not units:
        raise OutputDefinitionError(f"No units given for output '{variable}'")
    if any(u < 1 for u in units):
        raise OutputDefinitionError(f"Units must be positive integers, got {units}")

    return OutputDefinition(file=file, variable=variable.strip(), unit=tuple(units))


def _clean_file_name(file: str) -> str:
    if not isinstance(file, str) or not file.strip():
        raise OutputDefinitionError("Output file name must be a non-empty string")
    name = file.strip()
    if name.endswith('.txt'):
        name = name[:-4]
    for suffix in ('_day', '_mon', '_yr', '_aa'):
        if name.endswith(suffix):
            name = name[:-len(suffix)]
            break
    return name


def format_output_definitions(
    output: Union[OutputDefinition, Mapping[str, OutputDefinition]],
) -> pd.DataFrame:
    """
    Expand output definitions into one row per (file, variable, unit).

    Args:
        output: A single OutputDefinition (labelled by its variable) or a
            mapping of label -> OutputDefinition

    Returns:
        DataFrame with columns label, file, variable, unit, name

    Raises:
        OutputDefinitionError: If no output is given or result names clash
    """
    if isinstance(output, OutputDefinition):
        output = {output.variable: output}
    if not output:
        raise OutputDefinitionError("At least one output must be defined")

    rows = []
    for label, definition in output.items():
        if not isinstance(definition, OutputDefinition):
            raise OutputDefinitionError(
                f"Output '{label}' must be created with define_output(), got {type(definition).__name__}"
            )
        multi_unit = len(definition.unit) > 1
        for unit in definition.unit:
            rows.append({
                'label': label,
                'file': definition.file,
                'variable': definition.variable,
                'unit': unit,
                'name': f"{label}_{unit}" if multi_unit else label,
            })

    table = pd.DataFrame(rows, columns=OUTPUT_TABLE_COLUMNS)
    duplicated = table['name'][table['name'].duplicated()].unique().tolist()
    if duplicated:
        raise OutputDefinitionError(f"Output names must be unique, duplicated: {duplicated}")
    return table
