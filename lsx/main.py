#!/usr/bin/env python3
"""
Main entry point for lsx.

This module provides the main entry point for the lsx utility.
"""

import sys

from lsx import cli


def main() -> None:
    """Run the CLI and exit with its status."""
    sys.exit(cli.main())


if __name__ == "__main__":
    main()
