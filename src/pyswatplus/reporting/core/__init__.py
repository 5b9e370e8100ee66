# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Core reporting utilities.

This module provides shared utilities for the reporting subsystem.
"""

from pyswatplus.reporting.core.base_plotter import BasePlotter

__all__ = ['BasePlotter']
