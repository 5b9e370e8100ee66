# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
pySWATplus Command-Line Interface entry point.

Provides the main() function that serves as the entry point for the
`pyswatplus` command declared in pyproject.toml.
"""

import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the pySWATplus CLI.

    Returns:
        Process exit code (0 success, 1 runtime failure, 2 usage error)
    """
    from pyswatplus.cli.argument_parser import CLIParser
    from pyswatplus.cli.exit_codes import ExitCode
    from pyswatplus.core.exceptions import PySWATplusError

    try:
        parser = CLIParser()
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on usage errors and 0 for --help/--version
        return int(e.code or 0)

    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return ExitCode.INTERRUPTED
    except (PySWATplusError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
