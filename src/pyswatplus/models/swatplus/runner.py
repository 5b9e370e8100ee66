# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
SWAT+ Model Runner.

Runs a SWAT+ project for a set of parameter combinations. The project
folder (TxtInOut) is copied into ``<run_path>/.model_run/thread_<i>``
folders, one per worker thread. Each worker takes a free folder, writes the
run's ``calibration.cal``, executes SWAT+ inside it and reads the requested
variables from the text outputs.
"""

import os
import queue
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from tqdm import tqdm

from pyswatplus.core.constants import SWATplusFiles
from pyswatplus.core.exceptions import (
    ModelExecutionError,
    ModelOutputError,
    ValidationError,
    pyswatplus_error_handler,
    require,
)
from pyswatplus.core.mixins import ConfigMixin, LoggingMixin
from pyswatplus.models.mixins import SubprocessExecutionMixin

from .output_definition import OutputDefinition, format_output_definitions
from .output_reader import extract_variables, output_file_name
from .parameters import ParameterSet, check_parameters_exist, format_parameters
from .results import SwatRunResult, run_digits, run_name, save_swat_run
from .txtinout import (
    ModelSettings,
    check_output_objects,
    read_print_prt,
    read_time_sim,
    resolve_model_settings,
    set_calibration_in_file_cio,
    write_calibration_cal,
    write_model_settings,
)

MODEL_RUN_DIR = '.model_run'


class SWATplusRunner(LoggingMixin, ConfigMixin, SubprocessExecutionMixin):
    """
    Runner for SWAT+ projects.

    Args:
        config: Optional PySWATplusConfig supplying defaults (executable,
            thread count, timeout)
        logger: Optional logger instance
    """

    MODEL_NAME = "SWAT+"

    def __init__(self, config=None, logger=None):
        self.config = config
        if logger is not None:
            self.logger = logger

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def locate_executable(self, project_path: Path, executable: Optional[Union[str, Path]] = None) -> Path:
        """
        Find the SWAT+ executable.

        Order: the *executable* argument, the configured ``SWATPLUS_EXE``,
        then the single executable file named ``swat*`` in the project folder.

        Raises:
            ModelExecutionError: If no (or no unique) executable is found
        """
        executable = executable or self._get_config_value(
            lambda: self.config.simulation.executable, dict_key='SWATPLUS_EXE'
        )
        if executable:
            candidate = Path(executable).expanduser()
            if candidate.is_file():
                return candidate.resolve()
            on_path = shutil.which(str(executable))
            if on_path:
                return Path(on_path)
            raise ModelExecutionError(f"SWAT+ executable not found: {executable}")

        candidates = [
            f for f in Path(project_path).iterdir()
            if f.is_file() and f.name.lower().startswith('swat') and os.access(f, os.X_OK)
        ]
        if len(candidates) != 1:
            found = ', '.join(f.name for f in candidates) or 'none'
            raise ModelExecutionError(
                f"Cannot determine the SWAT+ executable in {project_path} (found: {found}). "
                "Pass executable= or set SWATPLUS_EXE."
            )
        self.logger.debug(f"Using SWAT+ executable {candidates[0]}")
        return candidates[0].resolve()

    @staticmethod
    def _copy_ignore(directory: str, names: List[str]) -> List[str]:
        """Skip earlier run folders and model outputs when copying a project."""
        return [
            name for name in names
            if name == MODEL_RUN_DIR or name.endswith(SWATplusFiles.OUTPUT_SUFFIXES)
        ]

    def build_thread_folders(
        self,
        project_path: Path,
        run_path: Path,
        n_thread: int,
        refresh: bool = True,
    ) -> List[Path]:
        """
        Create ``thread_1 .. thread_n`` copies of the project below *run_path*.

        Existing thread folders are deleted first when *refresh* is set and
        reused otherwise.
        """
        model_run = run_path / MODEL_RUN_DIR
        if refresh and model_run.exists():
            self.logger.debug(f"Removing existing thread folders in {model_run}")
            shutil.rmtree(model_run)
        model_run.mkdir(parents=True, exist_ok=True)

        thread_paths = []
        for i in range(1, n_thread + 1):
            thread_path = model_run / f"thread_{i}"
            if not thread_path.exists():
                shutil.copytree(project_path, thread_path, ignore=self._copy_ignore)
            thread_paths.append(thread_path)
        self.logger.info(f"Prepared {n_thread} thread folder(s) in {model_run}")
        return thread_paths

    def _resolve_run_index(self, parameter: ParameterSet, run_index: Optional[Iterable[int]]) -> List[int]:
        n_runs = max(parameter.n_runs, 1)
        if run_index is None:
            return list(range(1, n_runs + 1))
        if isinstance(run_index, int):
            run_index = [run_index]
        indices = sorted({int(i) for i in run_index})
        invalid = [i for i in indices if i < 1 or i > n_runs]
        if invalid:
            raise ValidationError(
                f"run_index {invalid} outside the available runs 1..{n_runs}"
            )
        return indices

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _clear_outputs(self, thread_path: Path, output_table: pd.DataFrame, interval: str) -> None:
        """Remove stale output files so a failed run cannot return old values."""
        for file in output_table['file'].unique():
            (thread_path / output_file_name(file, interval)).unlink(missing_ok=True)

    def _run_single(
        self,
        run: int,
        free_threads: 'queue.Queue[Path]',
        executable: Path,
        parameter: ParameterSet,
        output_table: pd.DataFrame,
        settings: ModelSettings,
        add_date: bool,
        timeout: int,
    ) -> Dict[str, pd.DataFrame]:
        """Execute one parameter set in a free thread folder and read its outputs."""
        thread_path = free_threads.get()
        try:
            if not parameter.is_empty:
                write_calibration_cal(
                    thread_path / SWATplusFiles.CALIBRATION_CAL,
                    parameter.definition,
                    parameter.values.loc[run],
                )
            self._clear_outputs(thread_path, output_table, settings.output_interval)

            log_file = thread_path / SWATplusFiles.RUN_LOG
            result = self.execute_subprocess(
                [str(executable)],
                log_file=log_file,
                cwd=thread_path,
                env={'OMP_NUM_THREADS': '1'},
                timeout=timeout,
                success_message=f"Run {run} finished in {thread_path.name}",
            )
            if not result.success:
                tail = self.read_log_tail(log_file)
                raise ModelExecutionError(
                    f"{result.error_message}" + (f"\n{tail}" if tail else '')
                )
            with pyswatplus_error_handler(f"reading outputs of run {run}", error_type=ModelOutputError):
                return extract_variables(thread_path, output_table, settings.output_interval, add_date)
        finally:
            free_threads.put(thread_path)

    def run(
        self,
        project_path: Union[str, Path],
        output: Union[OutputDefinition, Mapping[str, OutputDefinition]],
        parameter: Optional[Union[pd.DataFrame, Mapping[str, Any]]] = None,
        start_date=None,
        end_date=None,
        years_skip: Optional[int] = None,
        start_date_print=None,
        output_interval: Optional[str] = None,
        run_index: Optional[Iterable[int]] = None,
        run_path: Optional[Union[str, Path]] = None,
        n_thread: Optional[int] = None,
        save_path: Optional[Union[str, Path]] = None,
        save_file: Optional[str] = None,
        return_output: bool = True,
        add_date: bool = True,
        refresh: bool = True,
        keep_folder: bool = False,
        quiet: bool = False,
        executable: Optional[Union[str, Path]] = None,
    ) -> Optional[SwatRunResult]:
        """
        Run SWAT+ for every selected parameter set.

        See run_swatplus for the arguments.

        Raises:
            ModelExecutionError: If the project or executable is invalid, or
                every simulation failed
            ValidationError: On invalid settings or run indices
        """
        project_path = Path(project_path).expanduser().resolve()
        require(project_path.is_dir(), f"Project folder not found: {project_path}", ModelExecutionError)
        require(
            (project_path / SWATplusFiles.FILE_CIO).exists(),
            f"{project_path} is not a SWAT+ project folder (no {SWATplusFiles.FILE_CIO})",
            ModelExecutionError,
        )

        exe = self.locate_executable(project_path, executable)
        output_table = format_output_definitions(output)
        parameter_set = format_parameters(parameter)
        check_parameters_exist(parameter_set.definition, project_path)
        runs = self._resolve_run_index(parameter_set, run_index)
        if not parameter_set.is_empty:
            parameter_set = parameter_set.subset(runs)

        settings = resolve_model_settings(
            project_path,
            start_date=start_date,
            end_date=end_date,
            years_skip=years_skip,
            start_date_print=start_date_print,
            output_interval=output_interval or self._get_config_value(
                lambda: self.config.simulation.output_interval, default='d'),
        )
        print_settings = read_print_prt(project_path / SWATplusFiles.PRINT_PRT)
        step = read_time_sim(project_path / SWATplusFiles.TIME_SIM).get('step', 0)

        n_thread = n_thread or self._get_config_value(
            lambda: self.config.system.n_thread, default=1, dict_key='N_THREAD')
        require(int(n_thread) >= 1, f"n_thread must be at least 1, got {n_thread}", ValidationError)
        n_workers = min(int(n_thread), len(runs))

        run_path = Path(run_path).expanduser().resolve() if run_path else project_path
        output_files = sorted(output_table['file'].unique())
        check_output_objects(print_settings, output_files)
        timeout = self._get_config_value(lambda: self.config.simulation.timeout, default=3600,
                                         dict_key='SWATPLUS_TIMEOUT')

        try:
            thread_paths = self.build_thread_folders(project_path, run_path, n_workers, refresh)
            for thread_path in thread_paths:
                write_model_settings(thread_path, settings, print_settings, output_files, step=step)
                set_calibration_in_file_cio(thread_path / SWATplusFiles.FILE_CIO,
                                            active=not parameter_set.is_empty)
            result = self._execute_runs(exe, runs, thread_paths, parameter_set, output_table,
                                        settings, add_date, timeout, quiet)
            result.run_info.update({
                'project_path': str(project_path),
                'executable': str(exe),
                'run_path': str(run_path),
                'model_settings': settings.as_dict(),
                'output_definition': output_table.to_dict(orient='records'),
            })
            if save_file:
                save_swat_run(result, Path(save_path) if save_path else project_path, save_file)
        finally:
            if not keep_folder:
                shutil.rmtree(run_path / MODEL_RUN_DIR, ignore_errors=True)

        return result if return_output else None

    def _execute_runs(
        self,
        exe: Path,
        runs: List[int],
        thread_paths: List[Path],
        parameter_set: ParameterSet,
        output_table: pd.DataFrame,
        settings: ModelSettings,
        add_date: bool,
        timeout: int,
        quiet: bool,
    ) -> SwatRunResult:
        """Run every parameter set on the thread folders and collect the outputs."""
        free_threads: 'queue.Queue[Path]' = queue.Queue()
        for thread_path in thread_paths:
            free_threads.put(thread_path)

        n_workers = len(thread_paths)
        started = datetime.now()
        self.logger.info(
            f"Running {self.MODEL_NAME} for {len(runs)} parameter set(s) on {n_workers} thread(s)"
        )

        outputs: Dict[int, Dict[str, pd.DataFrame]] = {}
        errors: List[Dict[str, Any]] = []
        with ThreadPoolExecutor(max_workers=n_workers) as pool:
            futures = {
                pool.submit(self._run_single, run, free_threads, exe, parameter_set,
                            output_table, settings, add_date, timeout): run
                for run in runs
            }
            progress = tqdm(as_completed(futures), total=len(futures), disable=quiet,
                            desc='SWAT+ runs', unit='run')
            for future in progress:
                run = futures[future]
                try:
                    outputs[run] = future.result()
                except (ModelExecutionError, ModelOutputError, OSError) as e:
                    self.logger.warning(f"Run {run} failed: {e}")
                    errors.append({'run': run, 'message': str(e)})

        finished = datetime.now()
        if not outputs:
            messages = '; '.join(f"run {e['run']}: {e['message'].splitlines()[0]}" for e in errors)
            raise ModelExecutionError(f"All {len(runs)} SWAT+ simulations failed ({messages})")

        n_digits = run_digits(runs)
        result = SwatRunResult(
            parameter=parameter_set,
            simulation=self._combine_outputs(outputs, output_table, n_digits, add_date),
            error_report=(pd.DataFrame(sorted(errors, key=lambda e: e['run']), columns=['run', 'message'])
                          if errors else None),
            run_info={
                'n_thread': n_workers,
                'run_index': runs,
                'run_digits': n_digits,
                'run_started': started.isoformat(timespec='seconds'),
                'run_finished': finished.isoformat(timespec='seconds'),
                'duration_seconds': round((finished - started).total_seconds(), 2),
            },
        )
        if errors:
            self.logger.warning(f"{len(errors)} of {len(runs)} simulations failed; see result.error_report")
        else:
            self.logger.info(f"Completed {len(runs)} simulation(s) in {result.run_info['duration_seconds']}s")
        return result

    @staticmethod
    def _combine_outputs(
        outputs: Dict[int, Dict[str, pd.DataFrame]],
        output_table: pd.DataFrame,
        n_digits: int,
        add_date: bool,
    ) -> Dict[str, pd.DataFrame]:
        """Merge per-run outputs into one table per output name with a column per run."""
        simulation: Dict[str, pd.DataFrame] = {}
        ordered = sorted(outputs)
        for name in output_table['name']:
            columns: Dict[str, Any] = {}
            first = outputs[ordered[0]][name]
            if add_date:
                columns['date'] = first['date'].to_numpy()
            for run in ordered:
                columns[run_name(run, n_digits)] = outputs[run][name]['value'].to_numpy()
            simulation[name] = pd.DataFrame(columns)
        return simulation


def run_swatplus(
    project_path: Union[str, Path],
    output: Union[OutputDefinition, Mapping[str, OutputDefinition]],
    parameter: Optional[Union[pd.DataFrame, Mapping[str, Any]]] = None,
    start_date=None,
    end_date=None,
    years_skip: Optional[int] = None,
    start_date_print=None,
    output_interval: str = 'd',
    run_index: Optional[Iterable[int]] = None,
    run_path: Optional[Union[str, Path]] = None,
    n_thread: Optional[int] = None,
    save_path: Optional[Union[str, Path]] = None,
    save_file: Optional[str] = None,
    return_output: bool = True,
    add_date: bool = True,
    refresh: bool = True,
    keep_folder: bool = False,
    quiet: bool = False,
    executable: Optional[Union[str, Path]] = None,
    config=None,
) -> Optional[SwatRunResult]:
    """
    Run a SWAT+ project and return the requested outputs.

    Args:
        project_path: SWAT+ project folder (TxtInOut)
        output: define_output() result or mapping label -> definition
        parameter: Parameter table (DataFrame or mapping); None runs the
            project with its own parameters
        start_date / end_date: Simulation period (default: time.sim)
        years_skip: Warm-up years not written to the outputs
            (default: print.prt)
        start_date_print: First date written to the outputs
        output_interval: 'd', 'm', 'y' or 'a'
        run_index: 1-based indices of the parameter sets to run
        run_path: Folder receiving the thread folders (default: project_path)
        n_thread: Number of parallel model runs
        save_path / save_file: Write the result to a NetCDF file
        return_output: Return the result (False when only saving)
        add_date: Add a date column to the output tables
        refresh: Rebuild existing thread folders
        keep_folder: Keep the thread folders after the run
        quiet: Hide the progress bar
        executable: Path or name of the SWAT+ executable
        config: Optional PySWATplusConfig with defaults

    Returns:
        SwatRunResult, or None if return_output is False

    Example:
        >>> q = define_output('channel_sd', 'flo_out', 1)
        >>> result = run_swatplus(project, q, parameter={'cn2.hru | change = abschg': [-5, 5]})
        >>> result.get('flo_out')
    """
    runner = SWATplusRunner(config=config)
    return runner.run(
        project_path,
        output,
        parameter=parameter,
        start_date=start_date,
        end_date=end_date,
        years_skip=years_skip,
        start_date_print=start_date_print,
        output_interval=output_interval,
        run_index=run_index,
        run_path=run_path,
        n_thread=n_thread,
        save_path=save_path,
        save_file=save_file,
        return_output=return_output,
        add_date=add_date,
        refresh=refresh,
        keep_folder=keep_folder,
        quiet=quiet,
        executable=executable,
    )
