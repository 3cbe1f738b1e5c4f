"""
Logging and user-facing diagnostics.

Uses loguru for structured JSON logging with automatic rotation.
Nothing is logged until configure_logging() adds a sink, so importing
the package (e.g. from tests) never touches the data directory.
"""
import sys
from pathlib import Path

from loguru import logger

from sleek.config import LOG_FILE, Tool

# Remove default stderr handler; sinks are added by configure_logging()
logger.remove()


def configure_logging(log_file: Path = None, debug: bool = False) -> None:
    """
    Add the JSON file sink (10MB rotation, keep 3 files).

    Args:
        log_file: Event log path (defaults to LOG_FILE)
        debug: Also mirror DEBUG-level records to stderr
    """
    log_file = log_file or LOG_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        warn(f"cannot create log directory {log_file.parent}")
    else:
        logger.add(
            log_file,
            format="{message}",
            serialize=True,  # JSON output
            rotation="10 MB",
            retention=3,
            compression="gz",
            catch=True,  # Never raise
        )
    if debug:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format="<dim>{time:HH:mm:ss}</dim> {level: <7} {extra[component]}: {message}",
        )


def log_event(component: str, event_type: str, data: dict = None, level: str = "info"):
    """
    Log structured event using loguru.

    Args:
        component: Name of the emitting component (e.g., "stats_store")
        event_type: Event type (e.g., "tracked", "write_failed")
        data: Additional context data
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level, logger.info)
    log_func(event_type, component=component, **(data or {}))


def warn(message: str) -> None:
    """Print a warning for the user on stderr."""
    print(f"[{Tool.PROGRAM_NAME}] Warning: {message}", file=sys.stderr)


def error(message: str) -> None:
    """Print an error for the user on stderr."""
    print(f"[{Tool.PROGRAM_NAME}] Error: {message}", file=sys.stderr)
