"""Main entry point for running turtlesh_pkg as a module.

This allows running turtlesh with:
    python -m turtlesh_pkg
    python -m turtlesh_pkg -c "echo hello | cat -n"
    python -m turtlesh_pkg --version

This is equivalent to running:
    python -m turtlesh_pkg.cli
    python turtlesh.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
