# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Custom exception hierarchy for pySWATplus.

This module defines a hierarchy of exceptions that provide clear, specific
error types for the different failure modes of loading demo data, defining
outputs and parameters, running SWAT+ and plotting its results.
"""

import logging
from contextlib import contextmanager
from typing import Optional


class PySWATplusError(Exception):
    """
    Base exception for all pySWATplus-specific errors.

    All custom exceptions in pySWATplus inherit from this class, so every
    package error can be caught with a single except clause.
    """
    pass


class ConfigurationError(PySWATplusError):
    """
    Configuration-related errors.

    Raised when:
    - Configuration file cannot be loaded or parsed
    - Configuration values fail schema validation
    """
    pass


class ValidationError(PySWATplusError):
    """
    Data or argument validation failures.

    Raised when:
    - Simulation periods are inconsistent
    - Run indices are out of range
    - Required arguments are missing
    """
    pass


class DataAcquisitionError(PySWATplusError):
    """
    Demo data download/processing failures.

    Raised when:
    - An unknown demo dataset is requested
    - Download fails after all retry attempts
    - A downloaded archive cannot be extracted
    """
    pass


class ModelExecutionError(PySWATplusError):
    """
    SWAT+ execution failures.

    Raised when:
    - The SWAT+ executable cannot be located
    - The project folder is not a valid TxtInOut directory
    - Every simulation of a run failed
    """
    pass


class ModelOutputError(PySWATplusError):
    """
    SWAT+ output reading failures.

    Raised when:
    - An expected output file was not written
    - A requested variable or spatial unit is missing in an output table
    """
    pass


class OutputDefinitionError(ValidationError):
    """
    Invalid output definitions.

    Raised when:
    - File or variable names are empty
    - Units are not positive integers or are duplicated
    - An output object is unknown to print.prt
    """
    pass


class ParameterDefinitionError(ValidationError):
    """
    Invalid parameter definitions.

    Raised when:
    - A parameter column name does not follow the definition syntax
    - The change type is missing or unknown
    - Parameter names are not unique
    - Parameter values are not numeric
    """
    pass


class FileOperationError(PySWATplusError):
    """
    File I/O operation failures.

    Raised when:
    - Required model input file not found
    - File cannot be read or written
    - Thread folder creation fails
    """
    pass


class ReportingError(PySWATplusError):
    """
    Visualization and reporting failures.

    Raised when:
    - Columns required for a plot are missing
    - Plot data is empty
    """
    pass


# =============================================================================
# Validation Helpers
# =============================================================================


def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ValidationError)

    Raises:
        ValidationError (or specified error_type) if condition is False

    Example:
        >>> require(n_thread > 0, "n_thread must be positive")
    """
    if error_type is None:
        error_type = ValidationError
    if not condition:
        raise error_type(message)


@contextmanager
def pyswatplus_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    error_type: type = PySWATplusError
):
    """
    Context manager converting generic failures into package errors.

    Args:
        operation: Description of the operation being performed
        logger: Logger for the error message. If None, errors are not logged.
        error_type: pySWATplus exception type to convert generic exceptions to

    Raises:
        The original exception if it is already a PySWATplusError, otherwise
        *error_type* chained to it

    Example:
        >>> with pyswatplus_error_handler("reading outputs", error_type=ModelOutputError):
        ...     extract_variables(thread_dir, output_table, 'd')
    """
    try:
        yield
    except PySWATplusError:
        raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        raise error_type(f"Failed during {operation}: {e}") from e


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
    'require',
    'pyswatplus_error_handler',
]
