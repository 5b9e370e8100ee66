# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Mixins shared by model runners."""

from .subprocess_execution import ExecutionResult, SubprocessExecutionMixin

__all__ = ['ExecutionResult', 'SubprocessExecutionMixin']
