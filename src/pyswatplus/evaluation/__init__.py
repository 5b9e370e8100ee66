# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Goodness-of-fit metrics for comparing simulation runs with observations."""

from .metrics import METRICS, evaluate_runs, kge, nse, pbias, rmse

__all__ = ['METRICS', 'evaluate_runs', 'kge', 'nse', 'pbias', 'rmse']
