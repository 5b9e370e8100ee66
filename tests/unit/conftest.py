"""
Unit test fixtures and configuration.

Fixtures specific to unit tests (fast, isolated tests).
"""

from unittest.mock import MagicMock

import pytest

from pyswatplus.cli.commands.base import BaseCommand
from pyswatplus.cli.console import Console

# ============================================================================
# Common Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_config():
    """Create a basic flat configuration for unit tests."""
    return {
        'N_THREAD': 2,
        'SWATPLUS_TIMEOUT': 60,
        'OUTPUT_INTERVAL': 'd',
    }


@pytest.fixture
def mock_logger():
    """Create a mock logger for unit tests."""
    return MagicMock()


@pytest.fixture
def captured_console():
    """Route CLI console output into buffers and restore the shared console afterwards."""
    import io

    previous = BaseCommand._console
    out, err = io.StringIO(), io.StringIO()
    console = Console(out=out, err=err)
    BaseCommand.set_console(console)
    yield console
    BaseCommand.set_console(previous)
