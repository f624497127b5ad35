"""Centralized configuration for turtlesh.

This module defines:
- History file naming
- Memory poller defaults (alert threshold, interval, report size)
- Evaluator output precision and strictness
- I/O sizes used by the redirect connector
- Logging defaults

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with TURTLESH_)
"""

import os

try:
    import importlib.metadata

    VERSION = importlib.metadata.version("turtlesh")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# History file, resolved relative to the user's home directory
HISTORY_FILE_NAME = os.getenv("TURTLESH_HISTORY_FILE", ".turtlesh_history")

# Memory poller
DEFAULT_MEM_LIMIT = float(os.getenv("TURTLESH_MEM_LIMIT", "70"))  # percent
MEM_POLL_SECONDS = float(os.getenv("TURTLESH_MEM_POLL_SECONDS", "5"))
MEM_TOP_PROCESSES = int(os.getenv("TURTLESH_MEM_TOP_PROCESSES", "5"))
ENABLE_MEMWATCH = os.getenv("TURTLESH_ENABLE_MEMWATCH", "true").lower() == "true"

# Expression evaluator
OUTPUT_PRECISION = int(os.getenv("TURTLESH_OUTPUT_PRECISION", "6"))  # significant digits
STRICT_MATH = os.getenv("TURTLESH_STRICT_MATH", "false").lower() == "true"
FACTORIAL_OVERFLOW_AT = 171  # 171! no longer fits in a float

# Process orchestration
COPY_CHUNK_SIZE = int(os.getenv("TURTLESH_COPY_CHUNK_SIZE", "65536"))  # bytes
REDIRECT_FILE_MODE = 0o666  # before umask
EXEC_NOT_FOUND_STATUS = 127
EXEC_FAILED_STATUS = 126
GENERIC_FAILURE_STATUS = 1

# Interactive loop
PROMPT_SUFFIX = "$ "
LOG_LEVEL = os.getenv("TURTLESH_LOG_LEVEL", "WARNING")
