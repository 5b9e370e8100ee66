# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Simulation results and their persistence.

A run is saved as a single NetCDF file:

- one data variable per output name with dims ``(date, run)``
  (``(step, run)`` when the run was made without dates)
- ``parameter_values`` with dims ``(run, parameter)``
- parameter definition, output definition, error report and run info as
  JSON encoded global attributes
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd
import xarray as xr

from pyswatplus.core.exceptions import FileOperationError, ModelOutputError, pyswatplus_error_handler

from .parameters import DEFINITION_COLUMNS, ParameterSet

logger = logging.getLogger(__name__)

PARAMETER_VARIABLE = 'parameter_values'
TUPLE_COLUMNS = ('unit', 'lyr', 'year', 'day')


def run_name(run: int, n_digits: int = 3) -> str:
    """Column name of a run, e.g. ``run_007``."""
    return f"run_{run:0{n_digits}d}"


def run_digits(runs: Iterable[int]) -> int:
    """Zero padding of run names: at least three digits, more for 1000+ runs."""
    return max(3, len(str(max(runs))))


def run_number(name: str) -> int:
    """Inverse of run_name."""
    return int(str(name).rsplit('_', 1)[-1])


@dataclass
class SwatRunResult:
    """
    Result of run_swatplus.

    Attributes:
        parameter: Parameter values and definitions of the executed runs
        simulation: Output name -> DataFrame with ``date`` (if requested)
            and one column per successful run
        error_report: DataFrame(run, message) of failed runs, or None
        run_info: Settings and bookkeeping of the run
    """
    parameter: ParameterSet = field(default_factory=ParameterSet)
    simulation: Dict[str, pd.DataFrame] = field(default_factory=dict)
    error_report: Optional[pd.DataFrame] = None
    run_info: Dict[str, Any] = field(default_factory=dict)

    @property
    def variables(self) -> List[str]:
        return list(self.simulation)

    @property
    def runs(self) -> List[str]:
        """Run columns present in the simulation tables."""
        names: List[str] = []
        for table in self.simulation.values():
            for column in table.columns:
                if column != 'date' and column not in names:
                    names.append(column)
        return sorted(names, key=run_number)

    def get(self, name: str) -> pd.DataFrame:
        try:
            return self.simulation[name]
        except KeyError:
            raise KeyError(
                f"No output '{name}' in result. Available: {', '.join(self.simulation)}"
            ) from None

    def __repr__(self) -> str:
        errors = 0 if self.error_report is None else len(self.error_report)
        return (f"SwatRunResult(variables={self.variables}, runs={len(self.runs)}, "
                f"errors={errors})")


# =============================================================================
# Serialization helpers
# =============================================================================

def _json_default(value: Any) -> Any:
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (np.floating,)):
        return float(value)
    if isinstance(value, (pd.Timestamp, np.datetime64)):
        return str(pd.Timestamp(value).isoformat())
    if isinstance(value, set):
        return sorted(value)
    return str(value)


def _frame_to_json(frame: Optional[pd.DataFrame]) -> str:
    if frame is None:
        return 'null'
    return json.dumps(frame.to_dict(orient='records'), default=_json_default)


def _definition_from_json(text: str) -> pd.DataFrame:
    records = json.loads(text)
    definition = pd.DataFrame(records, columns=DEFINITION_COLUMNS)
    for column in TUPLE_COLUMNS:
        definition[column] = [tuple(v) if v is not None else None for v in definition[column]]
    definition['conditions'] = [[tuple(c) for c in (v or [])] for v in definition['conditions']]
    return definition


def _to_data_array(table: pd.DataFrame) -> xr.DataArray:
    runs = [c for c in table.columns if c != 'date']
    if 'date' in table.columns:
        index = pd.DatetimeIndex(table['date'], name='date')
    else:
        index = pd.RangeIndex(len(table), name='step')
    values = table[runs].to_numpy(dtype=float)
    return xr.DataArray(values, coords={index.name: index, 'run': runs}, dims=(index.name, 'run'))


# =============================================================================
# Save / load
# =============================================================================

def save_swat_run(
    result: SwatRunResult,
    save_path: Union[str, Path],
    save_file: str,
) -> Path:
    """
    Write a run result to ``save_path/save_file`` (NetCDF).

    Returns:
        Path of the written file

    Raises:
        FileOperationError: If the file cannot be written
    """
    save_path = Path(save_path)
    save_path.mkdir(parents=True, exist_ok=True)
    target = save_path / save_file
    if target.suffix != '.nc':
        target = target.with_name(target.name + '.nc')

    data_vars = {name: _to_data_array(table) for name, table in result.simulation.items()}
    if not result.parameter.is_empty:
        values = result.parameter.values
        n_digits = result.run_info.get('run_digits') or run_digits(values.index)
        data_vars[PARAMETER_VARIABLE] = xr.DataArray(
            values.to_numpy(dtype=float),
            coords={'run': [run_name(r, n_digits) for r in values.index],
                    'parameter': list(values.columns)},
            dims=('run', 'parameter'),
        )

    dataset = xr.Dataset(data_vars)
    dataset.attrs = {
        'parameter_definition': _frame_to_json(
            result.parameter.definition if not result.parameter.is_empty else None
        ),
        'output_definition': json.dumps(result.run_info.get('output_definition', []),
                                        default=_json_default),
        'error_report': _frame_to_json(result.error_report),
        'run_info': json.dumps(
            {k: v for k, v in result.run_info.items() if k != 'output_definition'},
            default=_json_default,
        ),
    }

    try:
        dataset.to_netcdf(target)
    except (OSError, ValueError) as e:
        raise FileOperationError(f"Failed to save simulation results to {target}: {e}") from e
    logger.info(f"Simulation results saved to {target}")
    return target


def _as_list(value: Optional[Union[str, int, Iterable]]) -> Optional[list]:
    if value is None:
        return None
    if isinstance(value, (str, int)):
        return [value]
    return list(value)


def load_swat_run(
    file: Union[str, Path],
    variable: Optional[Union[str, Iterable[str]]] = None,
    run: Optional[Union[int, Iterable[int]]] = None,
) -> SwatRunResult:
    """
    Load a saved run.

    Args:
        file: NetCDF file written by save_swat_run
        variable: Output name(s) to load (default: all)
        run: Run number(s) to load (default: all)

    Raises:
        FileOperationError: If the file does not exist or cannot be read
        ModelOutputError: If a requested variable or run is not in the file
    """
    file = Path(file)
    if not file.exists():
        raise FileOperationError(f"Saved run not found: {file}")

    with pyswatplus_error_handler(f"reading saved run {file}", logger, error_type=FileOperationError):
        with xr.open_dataset(file) as dataset:
            dataset = dataset.load()

    available = [v for v in dataset.data_vars if v != PARAMETER_VARIABLE]
    variables = _as_list(variable) or available
    missing = [v for v in variables if v not in available]
    if missing:
        raise ModelOutputError(f"Variables {missing} not in {file}. Available: {available}")

    runs = None
    if run is not None:
        requested = [int(r) for r in _as_list(run)]
        stored = {run_number(name): str(name) for name in dataset['run'].values}
        absent = [r for r in requested if r not in stored]
        if absent:
            raise ModelOutputError(f"Runs {absent} not in {file}")
        runs = [stored[r] for r in requested]

    simulation: Dict[str, pd.DataFrame] = {}
    for name in variables:
        array = dataset[name]
        if runs is not None:
            array = array.sel(run=runs)
        array = array.dropna('run', how='all')
        table = array.to_pandas()
        table.columns = [str(c) for c in table.columns]
        table.columns.name = None
        if table.index.name == 'date':
            table = table.reset_index()
        else:
            table = table.reset_index(drop=True)
        simulation[name] = table

    parameter = ParameterSet()
    definition_json = dataset.attrs.get('parameter_definition', 'null')
    if PARAMETER_VARIABLE in dataset.data_vars and definition_json != 'null':
        values = dataset[PARAMETER_VARIABLE].dropna('run', how='all')
        if runs is not None:
            values = values.sel(run=[r for r in runs if r in values['run'].values])
        frame = values.to_pandas()
        frame.index = pd.Index([run_number(r) for r in frame.index], name='run')
        frame.columns = [str(c) for c in frame.columns]
        parameter = ParameterSet(values=frame, definition=_definition_from_json(definition_json))

    error_json = dataset.attrs.get('error_report', 'null')
    error_records = json.loads(error_json)
    error_report = pd.DataFrame(error_records, columns=['run', 'message']) if error_records else None

    run_info = json.loads(dataset.attrs.get('run_info', '{}'))
    run_info['output_definition'] = json.loads(dataset.attrs.get('output_definition', '[]'))

    logger.debug(f"Loaded {len(simulation)} variables from {file}")
    return SwatRunResult(parameter=parameter, simulation=simulation,
                         error_report=error_report, run_info=run_info)


def scan_swat_run(file: Union[str, Path]) -> Dict[str, Any]:
    """
    Summarise a saved run without loading its data.

    Returns:
        Dict with variables, n_runs, runs, date_start, date_end, parameters
        and n_errors
    """
    file = Path(file)
    if not file.exists():
        raise FileOperationError(f"Saved run not found: {file}")

    with xr.open_dataset(file) as dataset:
        variables = [v for v in dataset.data_vars if v != PARAMETER_VARIABLE]
        runs = [str(r) for r in dataset['run'].values] if 'run' in dataset.coords else []
        parameters = ([str(p) for p in dataset['parameter'].values]
                      if 'parameter' in dataset.coords else [])
        if 'date' in dataset.coords and dataset.sizes.get('date', 0):
            date_start = pd.Timestamp(dataset['date'].values.min()).date().isoformat()
            date_end = pd.Timestamp(dataset['date'].values.max()).date().isoformat()
        else:
            date_start = date_end = None
        errors = json.loads(dataset.attrs.get('error_report', 'null')) or []

    return {
        'file': str(file),
        'variables': variables,
        'n_runs': len(runs),
        'runs': runs,
        'date_start': date_start,
        'date_end': date_end,
        'parameters': parameters,
        'n_errors': len(errors),
    }
