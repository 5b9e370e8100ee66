# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Demo data access."""

from .demo import DEMO_DATASETS, DemoDataLoader, load_demo

__all__ = ['DEMO_DATASETS', 'DemoDataLoader', 'load_demo']
