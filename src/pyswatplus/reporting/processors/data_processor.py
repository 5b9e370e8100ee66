# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Reshaping of simulation results for plotting.

Simulation tables have a ``date`` column and one column per run
(``run_001``, ``run_002``, ...). The helpers here convert units, join
observations, pivot to long format and aggregate per run or spatial unit.
"""

import logging
import numbers
import re
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import geopandas as gpd
import pandas as pd

from pyswatplus.core.constants import UnitConversion
from pyswatplus.core.exceptions import ReportingError, ValidationError

logger = logging.getLogger(__name__)

RunSelection = Optional[Union[int, str, Sequence[Union[int, str]]]]


def _run_columns(df: pd.DataFrame) -> List[str]:
    return [c for c in df.columns if str(c).startswith('run_')]


def select_runs(df: pd.DataFrame, run: RunSelection) -> List[str]:
    """Resolve run numbers or names to run column names."""
    available = _run_columns(df)
    if run is None:
        return available
    if isinstance(run, (int, str)):
        run = [run]
    by_number = {int(c.rsplit('_', 1)[-1]): c for c in available}
    selected = []
    for r in run:
        if isinstance(r, str) and r in available:
            selected.append(r)
        elif not isinstance(r, str) and int(r) in by_number:
            selected.append(by_number[int(r)])
        else:
            raise ReportingError(f"Run {r!r} not found. Available runs: {available}")
    return selected


def _simulation_tables(result) -> Mapping[str, pd.DataFrame]:
    return getattr(result, 'simulation', result)


def convert_discharge(
    df: pd.DataFrame,
    columns: Optional[Iterable[str]] = None,
    area_km2: Optional[float] = None,
    to: str = 'mm',
) -> pd.DataFrame:
    """
    Convert discharge between m³/s and mm/day over a catchment area.

    Args:
        df: Table with discharge columns
        columns: Columns to convert (default: every numeric column)
        area_km2: Catchment area in km²
        to: 'mm' (m³/s -> mm/day) or 'cms' (mm/day -> m³/s)

    Returns:
        Converted copy of *df*
    """
    if isinstance(area_km2, bool) or not isinstance(area_km2, numbers.Real) or area_km2 <= 0:
        raise ValidationError(f"area_km2 must be positive, got {area_km2}")
    if to not in ('mm', 'cms'):
        raise ValidationError(f"to must be 'mm' or 'cms', got '{to}'")

    out = df.copy()
    columns = list(columns) if columns is not None else list(out.select_dtypes('number').columns)
    missing = [c for c in columns if c not in out.columns]
    if missing:
        raise ReportingError(f"Cannot convert missing columns {missing}")

    if to == 'mm':
        factor = UnitConversion.MM_DAY_TO_CMS / area_km2
    else:
        factor = area_km2 / UnitConversion.MM_DAY_TO_CMS
    out[columns] = out[columns] * factor
    return out


def join_observation(
    sim: pd.DataFrame,
    obs: pd.DataFrame,
    run: RunSelection = None,
    obs_column: Optional[str] = None,
) -> pd.DataFrame:
    """
    Combine simulated runs and observations in one table.

    The observation value column is renamed to ``obs`` and joined to the
    simulation dates (left join, dates without observation get NaN).

    Args:
        sim: Simulation table (date + run columns)
        obs: Observation table (date + value column)
        run: Run number(s) or name(s) to keep (default: all)
        obs_column: Observation value column (default: first non-date column)

    Returns:
        DataFrame with columns date, selected runs and obs
    """
    for name, frame in (('simulation', sim), ('observation', obs)):
        if 'date' not in frame.columns:
            raise ReportingError(f"The {name} table needs a 'date' column")

    if obs_column is None:
        candidates = [c for c in obs.columns if c != 'date']
        if not candidates:
            raise ReportingError("The observation table has no value column")
        obs_column = candidates[0]
    elif obs_column not in obs.columns:
        raise ReportingError(f"Observation column '{obs_column}' not found")

    runs = select_runs(sim, run)
    left = sim[['date'] + runs].copy()
    left['date'] = pd.to_datetime(left['date'])
    right = obs[['date', obs_column]].rename(columns={obs_column: 'obs'})
    right['date'] = pd.to_datetime(right['date'])
    return left.merge(right, on='date', how='left')


def to_long(
    df: pd.DataFrame,
    id_vars: Union[str, Sequence[str]] = 'date',
    value_name: str = 'value',
    var_name: str = 'variable',
) -> pd.DataFrame:
    """Pivot a wide table into (id_vars, variable, value) rows."""
    id_vars = [id_vars] if isinstance(id_vars, str) else list(id_vars)
    missing = [c for c in id_vars if c not in df.columns]
    if missing:
        raise ReportingError(f"Cannot pivot, id columns {missing} not found")
    return df.melt(id_vars=id_vars, var_name=var_name, value_name=value_name)


def water_balance_components(
    result,
    components: Optional[Iterable[str]] = None,
    runs: RunSelection = None,
) -> pd.DataFrame:
    """
    Mean value of each water balance component per run.

    Args:
        result: SwatRunResult or mapping name -> simulation table
        components: Output names to include (default: all outputs)
        runs: Run number(s) or name(s) (default: all)

    Returns:
        Long DataFrame with columns run, component, value
    """
    tables = _simulation_tables(result)
    components = list(components) if components is not None else list(tables)
    missing = [c for c in components if c not in tables]
    if missing:
        raise ReportingError(f"Components {missing} not in the simulation results")

    rows = []
    for component in components:
        table = tables[component]
        for run in select_runs(table, runs):
            rows.append({'run': run, 'component': component, 'value': float(table[run].mean())})
    return pd.DataFrame(rows, columns=['run', 'component', 'value'])


def unit_values(
    result,
    label: str,
    run: Union[int, str] = 1,
    how: str = 'mean',
) -> pd.DataFrame:
    """
    Collect a multi-unit output (``<label>_<unit>`` tables) into one value per unit.

    Args:
        result: SwatRunResult or mapping name -> simulation table
        label: Output label used in define_output
        run: Run number or name
        how: Aggregation over time ('mean', 'sum', 'max', 'min', 'median')

    Returns:
        DataFrame with columns unit, value
    """
    tables = _simulation_tables(result)
    pattern = re.compile(rf'^{re.escape(label)}_(\d+)$')
    rows = []
    for name, table in tables.items():
        match = pattern.match(name)
        if not match:
            continue
        column = select_runs(table, run)[0]
        rows.append({'unit': int(match.group(1)), 'value': float(table[column].agg(how))})
    if not rows:
        if label in tables:
            raise ReportingError(f"Output '{label}' has a single unit; nothing to map per unit")
        raise ReportingError(f"No unit outputs named '{label}_<unit>' in the results")
    return pd.DataFrame(rows).sort_values('unit').reset_index(drop=True)


def aggregate_by_unit(
    table: pd.DataFrame,
    unit_column: str,
    value_columns: Optional[Iterable[str]] = None,
    how: str = 'mean',
) -> pd.DataFrame:
    """Aggregate value columns per spatial unit."""
    if unit_column not in table.columns:
        raise ReportingError(f"Unit column '{unit_column}' not found")
    value_columns = (list(value_columns) if value_columns is not None
                     else [c for c in table.select_dtypes('number').columns if c != unit_column])
    missing = [c for c in value_columns if c not in table.columns]
    if missing:
        raise ReportingError(f"Value columns {missing} not found")
    return table.groupby(unit_column, as_index=False)[value_columns].agg(how)


def join_spatial(
    gdf: gpd.GeoDataFrame,
    table: pd.DataFrame,
    on: str,
    right_on: Optional[str] = None,
    how: str = 'left',
) -> gpd.GeoDataFrame:
    """
    Attach tabular values to spatial features.

    Args:
        gdf: Features (e.g. the HRU layer)
        table: Values per unit
        on: Key column in *gdf* (and in *table* unless right_on is given)
        right_on: Key column in *table*
        how: Join type

    Returns:
        GeoDataFrame with the table columns added
    """
    left_on = on
    right_on = right_on or on
    if left_on not in gdf.columns:
        raise ReportingError(f"Key column '{left_on}' not found in the spatial layer")
    if right_on not in table.columns:
        raise ReportingError(f"Key column '{right_on}' not found in the value table")

    merged = gdf.merge(table, left_on=left_on, right_on=right_on, how=how)
    if right_on != left_on:
        merged = merged.drop(columns=right_on)
    value_columns = [c for c in table.columns if c != right_on]
    unmatched = int(merged[value_columns].isna().all(axis=1).sum()) if value_columns else 0
    if unmatched:
        logger.debug(f"{unmatched} features without values after join on '{left_on}'")
    return gpd.GeoDataFrame(merged, geometry=gdf.geometry.name, crs=gdf.crs)
