# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Base command class for pySWATplus CLI commands.

This module provides the base class that all command handlers inherit from,
providing configuration loading and uniform error handling.
"""

import functools
import logging
from abc import ABC
from argparse import Namespace
from pathlib import Path
from typing import Callable, ClassVar, Optional

from pyswatplus.core.config.models import PySWATplusConfig
from pyswatplus.core.exceptions import (
    ConfigurationError,
    PySWATplusError,
    ValidationError,
)
from pyswatplus.core.logging_setup import configure_logging

from ..console import Console, console as global_console
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


def cli_exception_handler(func: Callable[[Namespace], int]) -> Callable[[Namespace], int]:
    """Map package exceptions raised by a command to exit codes."""

    @functools.wraps(func)
    def wrapper(args: Namespace) -> int:
        try:
            return func(args)
        except (ConfigurationError, ValidationError) as e:
            BaseCommand._console.error(str(e))
            return ExitCode.USAGE_ERROR
        except PySWATplusError as e:
            BaseCommand._console.error(str(e))
            logger.debug("Command failed", exc_info=True)
            return ExitCode.GENERAL_ERROR

    return wrapper


class BaseCommand(ABC):
    """
    Base class for all CLI command handlers.

    Attributes:
        _console: Shared console instance for all commands
    """

    _console: ClassVar[Console] = global_console

    @classmethod
    def set_console(cls, console: Console) -> None:
        """Set the console instance for all commands (used by tests)."""
        cls._console = console

    @staticmethod
    def load_config(args: Namespace, required: bool = False) -> PySWATplusConfig:
        """
        Load the configuration given by ``--config``.

        Raises:
            ConfigurationError: If the file is required but not given, or invalid
        """
        config_path = getattr(args, 'config', None)
        if not config_path:
            if required:
                raise ConfigurationError("This command needs --config FILE")
            return PySWATplusConfig.default()
        return PySWATplusConfig.from_file(Path(config_path))

    @staticmethod
    def setup_logging(args: Namespace, config: Optional[PySWATplusConfig] = None) -> None:
        level = 'DEBUG' if getattr(args, 'debug', False) else (
            config.system.log_level if config else 'INFO')
        log_file = None
        fmt = 'simple'
        if config is not None:
            fmt = config.system.log_format
            if config.system.log_to_file:
                log_file = config.system.log_file or Path('pyswatplus.log')
        configure_logging(level=level, log_file=log_file, fmt=fmt)
