# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Core infrastructure: configuration, exceptions, logging and mixins."""

from .exceptions import (
    ConfigurationError,
    DataAcquisitionError,
    FileOperationError,
    ModelExecutionError,
    ModelOutputError,
    OutputDefinitionError,
    ParameterDefinitionError,
    PySWATplusError,
    ReportingError,
    ValidationError,
)
from .logging_setup import configure_logging

__all__ = [
    'PySWATplusError',
    'ConfigurationError',
    'ValidationError',
    'DataAcquisitionError',
    'ModelExecutionError',
    'ModelOutputError',
    'OutputDefinitionError',
    'ParameterDefinitionError',
    'FileOperationError',
    'ReportingError',
    'configure_logging',
]
