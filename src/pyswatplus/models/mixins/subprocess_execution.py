# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Subprocess execution mixin for model runners.

Launches a model executable inside its run folder with stdout and stderr
captured in a log file, and pulls the tail of that log into error reports.
"""

import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class ExecutionResult:
    """Outcome of one model process.

    Attributes:
        success: Whether the process exited with code 0
        return_code: Process return code (-1 on timeout)
        log_file: File holding the process output
        duration_seconds: Wall time of the process
        error_message: Exit code or timeout description on failure
    """
    success: bool
    return_code: int = 0
    log_file: Optional[Path] = None
    duration_seconds: float = 0.0
    error_message: Optional[str] = None


class SubprocessExecutionMixin:
    """Mixin providing subprocess execution for model runners.

    Requires a ``logger`` attribute (see LoggingMixin).
    """

    def execute_subprocess(
        self,
        command: List[str],
        log_file: Path,
        cwd: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
        success_message: Optional[str] = None,
    ) -> ExecutionResult:
        """Run *command* and report how it ended.

        A non-zero exit code or a timeout is returned as a failed
        ExecutionResult; the caller decides whether that is an error.

        Args:
            command: Executable and arguments
            log_file: File receiving stdout and stderr
            cwd: Working directory of the process
            env: Variables added to a copy of os.environ
            timeout: Seconds before the process is killed (None = no limit)
            success_message: Debug message logged on success
        """
        run_env = os.environ.copy()
        if env:
            run_env.update(env)

        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        self.logger.debug(f"Executing {' '.join(command)} in {cwd or os.getcwd()}")

        start_time = time.time()
        try:
            with open(log_file, 'w', encoding='utf-8') as f:
                completed = subprocess.run(
                    command,
                    stdout=f,
                    stderr=subprocess.STDOUT,
                    cwd=cwd,
                    env=run_env,
                    text=True,
                    timeout=timeout,
                )
        except subprocess.TimeoutExpired:
            self.logger.error(f"Process timed out after {timeout}s, see {log_file}")
            return ExecutionResult(
                success=False,
                return_code=-1,
                log_file=log_file,
                duration_seconds=time.time() - start_time,
                error_message=f"Timeout after {timeout}s",
            )

        duration = time.time() - start_time
        if completed.returncode == 0:
            self.logger.debug(success_message or f"Process completed in {duration:.1f}s")
            return ExecutionResult(success=True, log_file=log_file, duration_seconds=duration)

        self.logger.debug(f"Process exited with code {completed.returncode}, see {log_file}")
        return ExecutionResult(
            success=False,
            return_code=completed.returncode,
            log_file=log_file,
            duration_seconds=duration,
            error_message=f"Exit code: {completed.returncode}",
        )

    @staticmethod
    def read_log_tail(log_file: Optional[Path], n_lines: int = 20) -> str:
        """Return the last *n_lines* of a log file, or '' if it cannot be read."""
        if log_file is None or not Path(log_file).exists():
            return ''
        try:
            with open(log_file, 'r', encoding='utf-8', errors='replace') as f:
                lines = f.readlines()
        except OSError:
            return ''
        return ''.join(lines[-n_lines:]).strip()
