#!/usr/bin/env python3
"""
turtlesh - a small interactive command interpreter

Main entry point for turtlesh. This file serves as a thin wrapper that
delegates all functionality to the turtlesh_pkg package.

Usage:
    python turtlesh.py                          # Interactive shell
    python turtlesh.py -c "echo hi | cat -n"    # Run one line and exit
    python turtlesh.py --help                   # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for turtlesh.

    Delegates all functionality to the turtlesh_pkg.cli module,
    which handles argument parsing, the interactive loop and command execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from turtlesh_pkg.cli import main_entry
    except ImportError as e:
        print(f"Error: Failed to import turtlesh_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1
    return main_entry(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
