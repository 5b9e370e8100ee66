"""
Root conftest.py - fixtures shared across all tests.

Sets up the test path and loads fixture modules from tests/fixtures/.
"""

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).parent.resolve()
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

pytest_plugins = [
    "fixtures.swatplus_fixtures",
    "fixtures.result_fixtures",
]


@pytest.fixture(scope="session")
def tests_dir():
    """Path to tests directory."""
    return TESTS_DIR
