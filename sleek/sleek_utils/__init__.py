"""
Shared utilities for cargo-sleek.

Usage:
    from sleek.sleek_utils import log_event, file_lock, Process
    # or
    from sleek.sleek_utils.io import atomic_write_json
"""

from .logging import (
    configure_logging,
    log_event,
    warn,
    error,
)

from .io import (
    file_lock,
    safe_load_json,
    atomic_write_json,
    atomic_write_text,
)

from .process import (
    Process,
    ProcessResult,
    SpawnError,
    exit_status,
)

__all__ = [
    # Logging
    "configure_logging",
    "log_event",
    "warn",
    "error",
    # I/O
    "file_lock",
    "safe_load_json",
    "atomic_write_json",
    "atomic_write_text",
    # Process
    "Process",
    "ProcessResult",
    "SpawnError",
    "exit_status",
]
