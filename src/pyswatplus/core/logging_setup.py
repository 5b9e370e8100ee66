# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Logging configuration for pySWATplus.

Library modules only create loggers with ``logging.getLogger(__name__)``;
applications (the CLI, notebooks) call :func:`configure_logging` once to
attach handlers to the package logger.
"""

import logging
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = 'pyswatplus'

LOG_FORMATS = {
    'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'simple': '%(levelname)s: %(message)s',
}


def configure_logging(
    level: Union[str, int] = 'INFO',
    log_file: Optional[Path] = None,
    fmt: str = 'detailed',
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Calling this repeatedly replaces the handlers installed by earlier calls,
    so notebooks can re-run it without duplicating output.

    Args:
        level: Log level name or number
        log_file: Optional file receiving the same records
        fmt: 'detailed' or 'simple'; anything else is used as a format string

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, '_pyswatplus_handler', False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMATS.get(fmt, fmt))

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._pyswatplus_handler = True  # type: ignore[attr-defined]
    logger.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler._pyswatplus_handler = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
