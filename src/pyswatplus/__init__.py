# src/pyswatplus/__init__.py
"""
pySWATplus: run SWAT+ projects from Python and analyse their outputs.

Typical session::

    from pyswatplus import define_output, load_demo, run_swatplus

    project = load_demo('project', path='demo')
    q = define_output('channel_sd', 'flo_out', 1)
    result = run_swatplus(project, {'q_sim': q},
                          parameter={'cn2.hru | change = abschg': [-10, 0, 10]},
                          n_thread=3)
"""

from .pyswatplus_version import __version__
from .core import PySWATplusError, configure_logging
from .core.config import PySWATplusConfig
from .data import load_demo
from .evaluation import evaluate_runs
from .models.swatplus import (
    SwatRunResult,
    define_output,
    load_swat_run,
    run_swatplus,
    scan_swat_run,
)

__all__ = [
    "__version__",
    "PySWATplusConfig",
    "PySWATplusError",
    "SwatRunResult",
    "configure_logging",
    "define_output",
    "evaluate_runs",
    "load_demo",
    "load_swat_run",
    "run_swatplus",
    "scan_swat_run",
]
