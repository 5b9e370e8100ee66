# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Reading and writing the SWAT+ input files controlled by a simulation run.

- ``time.sim``: simulation period
- ``print.prt``: warm-up years, print period and per-object print intervals
- ``file.cio``: master file; its ``chg`` line enables ``calibration.cal``
- ``calibration.cal``: parameter changes applied by SWAT+ at start-up

SWAT+ reads all of these with list-directed Fortran reads, so the writers
only need whitespace separated fields; fixed widths are kept for
readability.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from pyswatplus.core.constants import OUTPUT_INTERVALS, INTERVAL_ALIASES, SWATplusFiles
from pyswatplus.core.exceptions import (
    FileOperationError,
    OutputDefinitionError,
    ValidationError,
)

from .utils import compress_ranges

logger = logging.getLogger(__name__)

DateLike = Union[str, date, pd.Timestamp]

PRINT_OBJECT_COLUMNS = ['daily', 'monthly', 'yearly', 'avann']


# =============================================================================
# Model settings
# =============================================================================

@dataclass(frozen=True)
class ModelSettings:
    """Simulation period and print settings of a run."""
    start_date: date
    end_date: date
    years_skip: int
    start_date_print: Optional[date]
    output_interval: str

    def as_dict(self) -> Dict[str, object]:
        return {
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'years_skip': self.years_skip,
            'start_date_print': self.start_date_print.isoformat() if self.start_date_print else None,
            'output_interval': self.output_interval,
        }


def _to_date(value: Optional[DateLike]) -> Optional[date]:
    if value is None:
        return None
    try:
        return pd.Timestamp(value).date()
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Cannot interpret '{value}' as a date") from e


def _doy_to_date(year: int, day: int, end: bool = False) -> date:
    """SWAT+ uses day 0 for 'first' (start) or 'last' (end) day of the year."""
    if day == 0:
        return date(year, 12, 31) if end else date(year, 1, 1)
    return date(year, 1, 1) + timedelta(days=day - 1)


def normalize_interval(output_interval: str) -> str:
    """Map an interval name ('d', 'daily', 'mon', ...) to its single letter code."""
    code = INTERVAL_ALIASES.get(str(output_interval).strip().lower(), str(output_interval).strip().lower())
    if code not in OUTPUT_INTERVALS:
        raise ValidationError(
            f"output_interval must be one of {sorted(OUTPUT_INTERVALS)}, got '{output_interval}'"
        )
    return code


# =============================================================================
# time.sim
# =============================================================================

def read_time_sim(path: Path) -> Dict[str, int]:
    """Read the five values of time.sim (day_start, yrc_start, day_end, yrc_end, step)."""
    path = Path(path)
    if not path.exists():
        raise FileOperationError(f"{SWATplusFiles.TIME_SIM} not found: {path}")
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        lines = f.readlines()
    if len(lines) < 3:
        raise FileOperationError(f"{path} is incomplete")
    keys = lines[1].split()
    values = [int(float(v)) for v in lines[2].split()]
    return dict(zip(keys, values))


def time_sim_period(values: Dict[str, int]) -> tuple:
    """Translate time.sim values into a (start, end) date pair."""
    start = _doy_to_date(values['yrc_start'], values.get('day_start', 0))
    end = _doy_to_date(values['yrc_end'], values.get('day_end', 0), end=True)
    return start, end


def write_time_sim(path: Path, start_date: date, end_date: date, step: int = 0) -> None:
    """Write time.sim for the simulation period [start_date, end_date]."""
    day_start = start_date.timetuple().tm_yday
    day_end = end_date.timetuple().tm_yday
    text = (
        "time.sim: written by pySWATplus\n"
        f"{'day_start':>10}{'yrc_start':>11}{'day_end':>10}{'yrc_end':>10}{'step':>10}\n"
        f"{day_start:>10}{start_date.year:>11}{day_end:>10}{end_date.year:>10}{step:>10}\n"
    )
    Path(path).write_text(text, encoding='utf-8')


# =============================================================================
# print.prt
# =============================================================================

@dataclass
class PrintSettings:
    """Parsed print.prt: raw lines plus positions of the editable parts."""
    lines: List[str]
    period_line: int
    objects_start: int
    period: Dict[str, int]
    objects: Dict[str, List[str]]


def read_print_prt(path: Path) -> PrintSettings:
    """
    Parse print.prt.

    Raises:
        FileOperationError: If the file is missing or has no object table
    """
    path = Path(path)
    if not path.exists():
        raise FileOperationError(f"{SWATplusFiles.PRINT_PRT} not found: {path}")
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        lines = [line.rstrip('\n') for line in f]

    if len(lines) < 3 or 'nyskip' not in lines[1]:
        raise FileOperationError(f"{path} does not look like a SWAT+ print.prt file")
    keys = lines[1].split()
    period = dict(zip(keys, (int(float(v)) for v in lines[2].split())))

    objects_start = None
    for i, line in enumerate(lines):
        tokens = line.split()
        if tokens and tokens[0].lower() == 'objects':
            objects_start = i + 1
            break
    if objects_start is None:
        raise FileOperationError(f"No object table found in {path}")

    objects: Dict[str, List[str]] = {}
    for line in lines[objects_start:]:
        tokens = line.split()
        if len(tokens) == 5:
            objects[tokens[0]] = tokens[1:]

    return PrintSettings(lines=lines, period_line=2, objects_start=objects_start,
                         period=period, objects=objects)


def check_output_objects(settings: PrintSettings, output_files: List[str]) -> None:
    """
    Raise OutputDefinitionError if an output file is not a print.prt object.
    """
    unknown = sorted(set(output_files) - set(settings.objects))
    if unknown:
        raise OutputDefinitionError(
            f"Output files {unknown} are not available in {SWATplusFiles.PRINT_PRT}. "
            f"Available objects: {sorted(settings.objects)}"
        )


def write_print_prt(
    path: Path,
    settings: PrintSettings,
    model_settings: ModelSettings,
    output_files: List[str],
) -> None:
    """
    Write print.prt with the run's print period and output objects.

    All objects are switched off except *output_files*, which are printed
    at the model settings' output interval.

    Raises:
        OutputDefinitionError: If an output file is not a print.prt object
    """
    check_output_objects(settings, output_files)

    period = dict(settings.period)
    if model_settings.start_date_print is not None:
        period['nyskip'] = 0
        period['day_start'] = model_settings.start_date_print.timetuple().tm_yday
        period['yrc_start'] = model_settings.start_date_print.year
    else:
        period['nyskip'] = model_settings.years_skip
        period['day_start'] = 0
        period['yrc_start'] = 0
    period['day_end'] = 0
    period['yrc_end'] = 0

    column = PRINT_OBJECT_COLUMNS.index(OUTPUT_INTERVALS[model_settings.output_interval][0])
    lines = list(settings.lines)
    lines[settings.period_line] = ''.join(f"{v:>11}" for v in period.values())

    for i in range(settings.objects_start, len(lines)):
        tokens = lines[i].split()
        if len(tokens) != 5:
            continue
        flags = ['n'] * 4
        if tokens[0] in output_files:
            flags[column] = 'y'
        lines[i] = f"{tokens[0]:<16}" + ''.join(f"{flag:>10}" for flag in flags)

    Path(path).write_text('\n'.join(lines) + '\n', encoding='utf-8')


# =============================================================================
# file.cio
# =============================================================================

def set_calibration_in_file_cio(path: Path, active: bool) -> None:
    """Point the calibration entry of file.cio's 'chg' line to calibration.cal or null."""
    path = Path(path)
    if not path.exists():
        raise FileOperationError(f"{SWATplusFiles.FILE_CIO} not found: {path}")
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        lines = f.read().splitlines()

    for i, line in enumerate(lines):
        tokens = line.split()
        if tokens and tokens[0] == 'chg':
            if len(tokens) < 3:
                tokens += ['null'] * (3 - len(tokens))
            tokens[2] = SWATplusFiles.CALIBRATION_CAL if active else 'null'
            lines[i] = ''.join(f"{token:<18}" for token in tokens).rstrip()
            break
    else:
        raise FileOperationError(f"No 'chg' section in {path}")

    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')


# =============================================================================
# calibration.cal
# =============================================================================

def _object_tokens(unit) -> List[int]:
    """Units as SWAT+ object list; consecutive ids become 'first -last'."""
    if not unit:
        return []
    tokens: List[int] = []
    for first, last in compress_ranges(unit):
        tokens.append(first)
        if last != first:
            tokens.append(-last)
    return tokens


def write_calibration_cal(path: Path, definition: pd.DataFrame, values: pd.Series) -> None:
    """
    Write calibration.cal for one parameter set.

    Args:
        path: Target file
        definition: Parameter definition table (see parameters.format_parameters)
        values: Parameter values of one run, indexed by par_name
    """
    lines = [
        "calibration.cal: written by pySWATplus",
        f"{len(definition):>6}",
        f"{'NAME':<16} {'CHG_TYP':<10}{'VAL':>18}{'CONDS':>8}{'LYR1':>6}{'LYR2':>6}"
        f"{'YEAR1':>7}{'YEAR2':>7}{'DAY1':>6}{'DAY2':>6}{'OBJ_TOT':>9}",
    ]
    for row in definition.itertuples():
        lyr = row.lyr or (0, 0)
        year = row.year or (0, 0)
        day = row.day or (0, 0)
        objects = _object_tokens(row.unit)
        conditions = row.conditions or []
        line = (
            f"{row.parameter:<16} {row.change:<10}{float(values[row.par_name]):>18.8f}"
            f"{len(conditions):>8}{lyr[0]:>6}{lyr[1]:>6}{year[0]:>7}{year[1]:>7}"
            f"{day[0]:>6}{day[1]:>6}{len(objects):>9}"
        )
        if objects:
            line += '  ' + ' '.join(str(o) for o in objects)
        lines.append(line)
        for var, op, target, alt in conditions:
            lines.append(f"{var:<16} {op:>6}{target:>18.8f} {alt:>16}")

    Path(path).write_text('\n'.join(lines) + '\n', encoding='utf-8')


# =============================================================================
# Settings resolution
# =============================================================================

def resolve_model_settings(
    project_path: Path,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
    years_skip: Optional[int] = None,
    start_date_print: Optional[DateLike] = None,
    output_interval: str = 'd',
) -> ModelSettings:
    """
    Merge user settings with the project's time.sim and print.prt.

    Settings not given by the user are taken from the project files.

    Raises:
        ValidationError: If the period is inconsistent
    """
    project_path = Path(project_path)
    time_values = read_time_sim(project_path / SWATplusFiles.TIME_SIM)
    default_start, default_end = time_sim_period(time_values)
    print_settings = read_print_prt(project_path / SWATplusFiles.PRINT_PRT)

    start = _to_date(start_date) or default_start
    end = _to_date(end_date) or default_end
    if end < start:
        raise ValidationError(f"end_date ({end}) is before start_date ({start})")

    if years_skip is None:
        years_skip = print_settings.period.get('nyskip', 0)
    if years_skip < 0:
        raise ValidationError(f"years_skip must not be negative, got {years_skip}")
    if start.year + years_skip > end.year:
        raise ValidationError(
            f"years_skip={years_skip} skips the whole simulation period {start} - {end}"
        )

    start_print = _to_date(start_date_print)
    if start_print is not None and not (start <= start_print <= end):
        raise ValidationError(
            f"start_date_print ({start_print}) must lie within the simulation period {start} - {end}"
        )

    return ModelSettings(
        start_date=start,
        end_date=end,
        years_skip=int(years_skip),
        start_date_print=start_print,
        output_interval=normalize_interval(output_interval),
    )


def write_model_settings(
    thread_path: Path,
    settings: ModelSettings,
    print_settings: PrintSettings,
    output_files: List[str],
    step: int = 0,
) -> None:
    """Write time.sim and print.prt of a thread folder."""
    thread_path = Path(thread_path)
    write_time_sim(thread_path / SWATplusFiles.TIME_SIM, settings.start_date, settings.end_date, step=step)
    write_print_prt(thread_path / SWATplusFiles.PRINT_PRT, print_settings, settings, output_files)
