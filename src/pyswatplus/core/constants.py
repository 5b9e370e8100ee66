# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Constants shared across pySWATplus.

Unit conversion factors and the fixed vocabulary of SWAT+ input/output
files (change types, print intervals, file names).
"""

from typing import Dict, Tuple


class UnitConversion:
    """
    Unit conversion factors for hydrological calculations.
    """

    SECONDS_PER_DAY = 86400
    """Seconds in one day (24 hours × 3600 seconds)."""

    MM_DAY_TO_CMS = SECONDS_PER_DAY / 1000.0
    """
    Convert mm/day to m³/s (cms) per km² of catchment area.

    Formula: Q(cms) = Q(mm/day) * Area(km²) / MM_DAY_TO_CMS

    Derivation:
        1 mm/day over 1 km² =
        (0.001 m) × (1,000,000 m²) / (86,400 s) =
        1000 m³ / 86,400 s =
        0.01157 m³/s
    """


class SWATplusFiles:
    """Names of the SWAT+ files touched by a simulation run."""

    FILE_CIO = 'file.cio'
    TIME_SIM = 'time.sim'
    PRINT_PRT = 'print.prt'
    CALIBRATION_CAL = 'calibration.cal'
    CAL_PARMS_CAL = 'cal_parms.cal'
    RUN_LOG = 'run.log'

    # Output files written by SWAT+ that must not be copied into thread folders
    OUTPUT_SUFFIXES: Tuple[str, ...] = ('_day.txt', '_mon.txt', '_yr.txt', '_aa.txt',
                                        '_day.csv', '_mon.csv', '_yr.csv', '_aa.csv')


# Parameter change types understood by calibration.cal
CHANGE_TYPES: Tuple[str, ...] = ('absval', 'abschg', 'relchg', 'pctchg')

# Output interval codes -> (print.prt column, output file suffix)
OUTPUT_INTERVALS: Dict[str, Tuple[str, str]] = {
    'd': ('daily', 'day'),
    'm': ('monthly', 'mon'),
    'y': ('yearly', 'yr'),
    'a': ('avann', 'aa'),
}

# Long interval names accepted as aliases of the single letter codes
INTERVAL_ALIASES: Dict[str, str] = {
    'day': 'd', 'daily': 'd',
    'mon': 'm', 'month': 'm', 'monthly': 'm',
    'yr': 'y', 'year': 'y', 'yearly': 'y',
    'aa': 'a', 'avann': 'a', 'average_annual': 'a',
}
