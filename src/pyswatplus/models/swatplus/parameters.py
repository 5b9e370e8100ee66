# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
SWAT+ parameter table parsing.

A parameter table has one column per parameter change and one row per
simulation run. Column names carry the full parameter definition:

    [name::]parameter.obj | change = type [| condition = values ...]

- ``parameter.obj``: parameter name and object type as listed in
  ``cal_parms.cal`` (e.g. ``cn2.hru``, ``k.sol``, ``surlag.bsn``)
- ``name``: optional label used for the value column (defaults to the
  parameter name)
- ``change``: how the value is applied

    - ``absval``: replace the value
    - ``abschg``: add the value
    - ``relchg``: multiply by (1 + value)
    - ``pctchg``: change by value percent

- conditions restrict the change:

    - ``unit``: object ids (``1:10,15``)
    - ``lyr``: soil layers (``1:2``)
    - ``year`` / ``day``: period of the change (``2003:2005``, ``1:180``)
    - ``hsg``, ``texture``, ``plant``, ``landuse``: attribute equality
      (``hsg = A,B``)
    - ``slope``: numeric comparison (``slope = >0.05,<=0.2``)

Example:
    >>> par = {'cn2.hru | change = abschg': [-5, 0, 5],
    ...        'lat_ttime.hru | change = absval | unit = 1:3': [0.5, 1.0, 2.0]}
    >>> parameter_set = format_parameters(par)
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from pyswatplus.core.constants import CHANGE_TYPES, SWATplusFiles
from pyswatplus.core.exceptions import ParameterDefinitionError

from .utils import parse_integer_values, split_values

logger = logging.getLogger(__name__)

STRING_CONDITIONS = ('hsg', 'texture', 'plant', 'landuse')
NUMERIC_CONDITIONS = ('slope',)
RANGE_KEYS = ('lyr', 'year', 'day')
CONDITION_KEYS = ('change', 'unit') + RANGE_KEYS + STRING_CONDITIONS + NUMERIC_CONDITIONS

DEFINITION_COLUMNS = ['par_name', 'parameter', 'file_name', 'change', 'unit',
                      'lyr', 'year', 'day', 'conditions', 'full_name']

_COMPARISON = re.compile(r'^(?P<op><=|>=|==|=|<|>)\s*(?P<val>[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?\d+)?)$')


@dataclass
class ParameterSet:
    """Parameter values (one row per run) and their parsed definitions."""
    values: pd.DataFrame = field(default_factory=pd.DataFrame)
    definition: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=DEFINITION_COLUMNS))

    @property
    def n_runs(self) -> int:
        return len(self.values) if not self.values.empty else 0

    @property
    def is_empty(self) -> bool:
        return self.values.empty

    def subset(self, run_index: List[int]) -> 'ParameterSet':
        """Restrict to the given 1-based run indices, keeping the run number as index."""
        values = self.values.loc[run_index] if not self.values.empty else self.values
        return ParameterSet(values=values.copy(), definition=self.definition.copy())


def _parse_range(key: str, text: str) -> Tuple[int, int]:
    values = split_values(text)
    if len(values) != 1:
        raise ParameterDefinitionError(f"'{key}' expects a single value or 'start:end', got '{text}'")
    part = values[0]
    try:
        if ':' in part:
            start_str, end_str = part.split(':', 1)
            start, end = int(start_str), int(end_str)
        else:
            start = end = int(part)
    except ValueError as e:
        raise ParameterDefinitionError(f"Invalid '{key}' range '{text}'") from e
    if end < start:
        raise ParameterDefinitionError(f"'{key}' range '{text}' ends before it starts")
    return start, end


def _parse_numeric_condition(key: str, text: str) -> List[Tuple[str, str, float, str]]:
    conditions = []
    for part in split_values(text):
        match = _COMPARISON.match(part.replace(' ', ''))
        if not match:
            raise ParameterDefinitionError(
                f"Condition '{key}' needs an operator and a number (e.g. '>0.05'), got '{part}'"
            )
        op = match.group('op')
        op = '=' if op == '==' else op
        conditions.append((key, op, float(match.group('val')), 'null'))
    return conditions


def parse_parameter_name(full_name: str) -> Dict[str, Any]:
    """
    Parse one parameter column name into its definition.

    Args:
        full_name: Column name following the parameter definition syntax

    Returns:
        Dict with the keys of DEFINITION_COLUMNS

    Raises:
        ParameterDefinitionError: If the syntax is invalid
    """
    parts = [p.strip() for p in str(full_name).split('|')]
    head = parts[0]
    if '::' in head:
        par_name, head = (s.strip() for s in head.split('::', 1))
    else:
        par_name = None

    if '.' not in head:
        raise ParameterDefinitionError(
            f"Parameter '{full_name}' must be given as 'parameter.object', e.g. 'cn2.hru'"
        )
    parameter, file_name = (s.strip() for s in head.rsplit('.', 1))
    if not parameter or not file_name:
        raise ParameterDefinitionError(f"Invalid parameter name '{full_name}'")

    definition: Dict[str, Any] = {
        'par_name': par_name or parameter,
        'parameter': parameter,
        'file_name': file_name,
        'change': None,
        'unit': None,
        'lyr': None,
        'year': None,
        'day': None,
        'conditions': [],
        'full_name': str(full_name),
    }

    for part in parts[1:]:
        if not part:
            continue
        if '=' not in part:
            raise ParameterDefinitionError(f"Expected 'key = value' in '{full_name}', got '{part}'")
        key, text = (s.strip() for s in part.split('=', 1))
        key = key.lower()
        if key not in CONDITION_KEYS:
            raise ParameterDefinitionError(
                f"Unknown condition '{key}' in '{full_name}'. Valid keys: {', '.join(CONDITION_KEYS)}"
            )
        if key == 'change':
            change = text.strip().strip('"\'').lower()
            if change not in CHANGE_TYPES:
                raise ParameterDefinitionError(
                    f"Change type '{change}' of '{full_name}' must be one of {CHANGE_TYPES}"
                )
            definition['change'] = change
        elif key == 'unit':
            try:
                definition['unit'] = tuple(parse_integer_values(text))
            except ValueError as e:
                raise ParameterDefinitionError(f"Invalid units in '{full_name}': {e}") from e
        elif key in RANGE_KEYS:
            definition[key] = _parse_range(key, text)
        elif key in STRING_CONDITIONS:
            values = split_values(text)
            if not values:
                raise ParameterDefinitionError(f"Condition '{key}' of '{full_name}' has no values")
            definition['conditions'].extend((key, '=', 0.0, v) for v in values)
        else:
            definition['conditions'].extend(_parse_numeric_condition(key, text))

    if definition['change'] is None:
        raise ParameterDefinitionError(
            f"No change type defined for '{full_name}'. Add '| change = <type>' with type in {CHANGE_TYPES}"
        )
    return definition


def _to_value_frame(parameter: Union[pd.DataFrame, Mapping[str, Any]]) -> pd.DataFrame:
    if isinstance(parameter, pd.DataFrame):
        return parameter.reset_index(drop=True)

    columns: Dict[str, List[Any]] = {}
    for name, value in parameter.items():
        if np.isscalar(value):
            columns[name] = [value]
        else:
            columns[name] = list(value)

    lengths = {len(v) for v in columns.values()}
    if len(lengths - {1}) > 1:
        raise ParameterDefinitionError(
            f"All parameters must have the same number of values, got lengths {sorted(lengths)}"
        )
    n_runs = max(lengths) if lengths else 0
    return pd.DataFrame({k: v * n_runs if len(v) == 1 else v for k, v in columns.items()})


def format_parameters(
    parameter: Optional[Union[pd.DataFrame, Mapping[str, Any]]],
) -> ParameterSet:
    """
    Split a parameter table into values and parsed definitions.

    Args:
        parameter: DataFrame (one row per run), a mapping of column name ->
            scalar or sequence, or None for a run without parameter changes

    Returns:
        ParameterSet whose values are indexed by 1-based run number

    Raises:
        ParameterDefinitionError: On invalid names, values or duplicates
    """
    if parameter is None:
        return ParameterSet()

    values = _to_value_frame(parameter)
    if values.shape[1] == 0:
        return ParameterSet()

    definitions = [parse_parameter_name(col) for col in values.columns]
    definition = pd.DataFrame(definitions, columns=DEFINITION_COLUMNS)

    duplicated = definition['par_name'][definition['par_name'].duplicated()].unique().tolist()
    if duplicated:
        raise ParameterDefinitionError(
            f"Parameter names must be unique, duplicated: {duplicated}. "
            "Use 'name::parameter.obj' to give parameters distinct names."
        )

    values.columns = definition['par_name'].tolist()
    try:
        values = values.apply(pd.to_numeric)
    except (ValueError, TypeError) as e:
        raise ParameterDefinitionError(f"Parameter values must be numeric: {e}") from e
    if values.isna().any().any():
        missing = values.columns[values.isna().any()].tolist()
        raise ParameterDefinitionError(f"Parameter values missing for: {missing}")

    values.index = pd.RangeIndex(1, len(values) + 1, name='run')
    return ParameterSet(values=values, definition=definition)


def read_cal_parms(project_path: Path) -> Optional[pd.DataFrame]:
    """Read the parameter catalogue (cal_parms.cal) of a project, if present."""
    cal_parms = Path(project_path) / SWATplusFiles.CAL_PARMS_CAL
    if not cal_parms.exists():
        return None
    rows = []
    with open(cal_parms, 'r', encoding='utf-8', errors='replace') as f:
        lines = f.readlines()
    for line in lines[3:]:
        parts = line.split()
        if len(parts) >= 2:
            rows.append({'parameter': parts[0].lower(), 'file_name': parts[1].lower()})
    return pd.DataFrame(rows, columns=['parameter', 'file_name'])


def check_parameters_exist(definition: pd.DataFrame, project_path: Path) -> None:
    """
    Validate parameter/object combinations against the project's cal_parms.cal.

    Raises:
        ParameterDefinitionError: If a parameter is not available for calibration
    """
    if definition.empty:
        return
    available = read_cal_parms(project_path)
    if available is None:
        logger.debug(f"No {SWATplusFiles.CAL_PARMS_CAL} in {project_path}; skipping parameter check")
        return

    known = set(zip(available['parameter'], available['file_name']))
    unknown = [
        f"{row.parameter}.{row.file_name}"
        for row in definition.itertuples()
        if (row.parameter.lower(), row.file_name.lower()) not in known
    ]
    if unknown:
        raise ParameterDefinitionError(
            f"Parameters not found in {SWATplusFiles.CAL_PARMS_CAL}: {unknown}"
        )
