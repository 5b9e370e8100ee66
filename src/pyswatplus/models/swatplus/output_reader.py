# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Reader for SWAT+ text outputs.

SWAT+ writes every print object to ``<object>_<interval>.txt``: a title
line, a header line with column names, a line of units and then one
whitespace separated row per time step and spatial unit.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from pyswatplus.core.constants import OUTPUT_INTERVALS
from pyswatplus.core.exceptions import ModelOutputError

logger = logging.getLogger(__name__)


def output_file_name(file: str, interval: str) -> str:
    """File name SWAT+ uses for an output object at an interval code."""
    return f"{file}_{OUTPUT_INTERVALS[interval][1]}.txt"


def read_output_table(path: Path) -> pd.DataFrame:
    """
    Read a SWAT+ text output table.

    Args:
        path: Output file, e.g. ``channel_sd_day.txt``

    Returns:
        DataFrame with the column names of the header line

    Raises:
        ModelOutputError: If the file does not exist or cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise ModelOutputError(f"SWAT+ output file not found: {path}")
    try:
        table = pd.read_csv(path, sep=r'\s+', skiprows=[0, 2], header=0)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ModelOutputError(f"Cannot read SWAT+ output {path}: {e}") from e
    return table


def build_dates(table: pd.DataFrame, interval: str) -> pd.Series:
    """
    Build the time stamps of an output table.

    Daily rows use ``yr`` and ``jday``, monthly rows the first of ``mon``
    in ``yr``, yearly and average annual rows the first of January of ``yr``.
    """
    if 'yr' not in table.columns:
        raise ModelOutputError("Output table has no 'yr' column to build dates from")
    years = table['yr'].astype(int).astype(str)
    if interval == 'd':
        days = table['jday'].astype(int).astype(str).str.zfill(3)
        return pd.to_datetime(years + days, format='%Y%j')
    if interval == 'm':
        months = table['mon'].astype(int).astype(str).str.zfill(2)
        return pd.to_datetime(years + months + '01', format='%Y%m%d')
    return pd.to_datetime(years + '0101', format='%Y%m%d')


def extract_variables(
    thread_path: Path,
    output_table: pd.DataFrame,
    interval: str,
    add_date: bool = True,
) -> Dict[str, pd.DataFrame]:
    """
    Collect the requested variables from the outputs of one model run.

    Args:
        thread_path: Folder the model was run in
        output_table: Output definition table (see format_output_definitions)
        interval: Output interval code ('d', 'm', 'y', 'a')
        add_date: Add a ``date`` column built from the table's time columns

    Returns:
        Mapping of output name -> DataFrame with ``date`` (optional) and
        ``value`` columns

    Raises:
        ModelOutputError: If a file, variable or unit is missing
    """
    thread_path = Path(thread_path)
    tables: Dict[str, pd.DataFrame] = {}
    dates: Dict[str, Optional[pd.Series]] = {}
    results: Dict[str, pd.DataFrame] = {}

    for row in output_table.itertuples():
        if row.file not in tables:
            table = read_output_table(thread_path / output_file_name(row.file, interval))
            if 'unit' not in table.columns:
                raise ModelOutputError(f"Output '{row.file}' has no 'unit' column")
            tables[row.file] = table

        table = tables[row.file]
        if row.variable not in table.columns:
            raise ModelOutputError(
                f"Variable '{row.variable}' not found in output '{row.file}'. "
                f"Available: {', '.join(map(str, table.columns))}"
            )
        selected = table.loc[table['unit'] == row.unit]
        if selected.empty:
            raise ModelOutputError(f"Unit {row.unit} not found in output '{row.file}'")

        frame = pd.DataFrame({'value': selected[row.variable].astype(float).to_numpy()})
        if add_date:
            key = f"{row.file}_{row.unit}"
            if key not in dates:
                dates[key] = build_dates(selected, interval).reset_index(drop=True)
            frame.insert(0, 'date', dates[key])
        results[row.name] = frame

    logger.debug(f"Read {len(results)} output variables from {thread_path}")
    return results
