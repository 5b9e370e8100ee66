# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Data processors for reporting and visualization.

Unit conversion, observation joins, pivoting and aggregation of
simulation results ahead of plotting.
"""

from .data_processor import (
    aggregate_by_unit,
    convert_discharge,
    join_observation,
    join_spatial,
    select_runs,
    to_long,
    unit_values,
    water_balance_components,
)

__all__ = [
    "aggregate_by_unit",
    "convert_discharge",
    "join_observation",
    "join_spatial",
    "select_runs",
    "to_long",
    "unit_values",
    "water_balance_components",
]
