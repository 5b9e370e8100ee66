# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Core hydrological performance metric implementations."""

from typing import Callable, Dict, Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from pyswatplus.core.exceptions import ValidationError
from pyswatplus.reporting.processors.data_processor import RunSelection, select_runs

ArrayLike = Union[np.ndarray, pd.Series]


def _clean_data(observed: ArrayLike, simulated: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    """Clean and align observed and simulated data by removing NaN values."""
    obs = np.asarray(observed, dtype=float)
    sim = np.asarray(simulated, dtype=float)
    if obs.shape != sim.shape:
        raise ValidationError(
            f"Observed and simulated series differ in length ({len(obs)} vs {len(sim)})"
        )

    valid_mask = ~(np.isnan(obs) | np.isnan(sim))
    return obs[valid_mask], sim[valid_mask]


def _near_zero(value: float, obs: np.ndarray) -> bool:
    """Check if value is near zero relative to the scale of observations."""
    scale = np.mean(np.abs(obs))
    if scale == 0:
        return True
    return abs(value) < 1e-10 * scale * scale * len(obs)


def _safe_pearson_correlation(obs: np.ndarray, sim: np.ndarray) -> float:
    """Return Pearson r, or NaN when variance is near zero."""
    if _near_zero(np.sum((obs - np.mean(obs)) ** 2), obs):
        return np.nan
    if _near_zero(np.sum((sim - np.mean(sim)) ** 2), sim):
        return np.nan
    return float(np.corrcoef(obs, sim)[0, 1])


def nse(observed: ArrayLike, simulated: ArrayLike) -> float:
    """Calculate Nash-Sutcliffe Efficiency."""
    obs, sim = _clean_data(observed, simulated)
    if len(obs) == 0:
        return np.nan

    numerator = np.sum((obs - sim) ** 2)
    denominator = np.sum((obs - np.mean(obs)) ** 2)
    if _near_zero(denominator, obs):
        return np.nan
    return float(1.0 - numerator / denominator)


def kge(observed: ArrayLike, simulated: ArrayLike, return_components: bool = False
        ) -> Union[float, Dict[str, float]]:
    """Calculate Kling-Gupta Efficiency (Gupta et al., 2009)."""
    obs, sim = _clean_data(observed, simulated)
    if len(obs) < 2:
        if return_components:
            return {"KGE": np.nan, "r": np.nan, "alpha": np.nan, "beta": np.nan}
        return np.nan

    mean_obs = np.mean(obs)
    std_obs = np.std(obs, ddof=1)

    r = _safe_pearson_correlation(obs, sim)
    alpha = np.std(sim, ddof=1) / std_obs if std_obs != 0 else np.nan
    beta = np.mean(sim) / mean_obs if mean_obs != 0 else np.nan

    if np.isnan(r) or np.isnan(alpha) or np.isnan(beta):
        kge_value = np.nan
    else:
        kge_value = 1.0 - np.sqrt((r - 1) ** 2 + (alpha - 1) ** 2 + (beta - 1) ** 2)

    if return_components:
        return {"KGE": float(kge_value), "r": float(r), "alpha": float(alpha), "beta": float(beta)}
    return float(kge_value)


def pbias(observed: ArrayLike, simulated: ArrayLike) -> float:
    """Calculate percent bias; positive values mean overestimation."""
    obs, sim = _clean_data(observed, simulated)
    sum_obs = np.sum(obs)
    if len(obs) == 0 or sum_obs == 0:
        return np.nan
    return float(100.0 * (np.sum(sim) - sum_obs) / sum_obs)


def rmse(observed: ArrayLike, simulated: ArrayLike) -> float:
    """Calculate Root Mean Square Error."""
    obs, sim = _clean_data(observed, simulated)
    if len(obs) == 0:
        return np.nan
    return float(np.sqrt(np.mean((obs - sim) ** 2)))


METRICS: Dict[str, Callable[[ArrayLike, ArrayLike], float]] = {
    'NSE': nse,
    'KGE': kge,
    'PBIAS': pbias,
    'RMSE': rmse,
}


def evaluate_runs(
    sim: pd.DataFrame,
    obs: pd.DataFrame,
    metrics: Iterable[str] = ('NSE', 'KGE', 'PBIAS', 'RMSE'),
    obs_column: Optional[str] = None,
    run: RunSelection = None,
) -> pd.DataFrame:
    """
    Score every run of a simulation table against observations.

    Args:
        sim: DataFrame with ``date`` and one ``run_NNN`` column per run
        obs: DataFrame with ``date`` and the observed values
        metrics: Metric names from METRICS
        obs_column: Observation value column (default: the first non-date column)
        run: Run numbers or names to score (default: all run columns)

    Returns:
        DataFrame indexed by run with one column per metric
    """
    metrics = [str(m).upper() for m in metrics]
    unknown = [m for m in metrics if m not in METRICS]
    if unknown:
        raise ValidationError(f"Unknown metrics {unknown}. Available: {list(METRICS)}")
    for name, frame in (('sim', sim), ('obs', obs)):
        if 'date' not in frame.columns:
            raise ValidationError(f"'{name}' needs a 'date' column")

    if obs_column is None:
        value_columns = [c for c in obs.columns if c != 'date']
        if not value_columns:
            raise ValidationError("'obs' has no value column besides 'date'")
        obs_column = value_columns[0]
    elif obs_column not in obs.columns:
        raise ValidationError(f"Observation column '{obs_column}' not found")

    runs = select_runs(sim, run)
    if not runs:
        raise ValidationError("'sim' has no run columns to evaluate")

    observed = obs[['date', obs_column]].rename(columns={obs_column: '__obs__'})
    merged = sim[['date'] + runs].merge(observed, on='date', how='inner')

    rows = {}
    for name in runs:
        rows[name] = {m: METRICS[m](merged['__obs__'], merged[name]) for m in metrics}
    table = pd.DataFrame.from_dict(rows, orient='index')
    table.index.name = 'run'
    return table
