# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Console output for CLI commands.

Messages for the user go through a Console instance so tests can capture
them; diagnostics go through logging.
"""

import sys
from typing import TextIO


class Console:
    """Minimal user-facing output with status prefixes."""

    def __init__(self, out: TextIO = None, err: TextIO = None):
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def info(self, message: str) -> None:
        print(message, file=self.out)

    def success(self, message: str) -> None:
        print(f"✓ {message}", file=self.out)

    def warning(self, message: str) -> None:
        print(f"Warning: {message}", file=self.err)

    def error(self, message: str) -> None:
        print(f"Error: {message}", file=self.err)


console = Console()
