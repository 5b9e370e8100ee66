# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""Command-line interface of pySWATplus."""
