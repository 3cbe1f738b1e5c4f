"""
Centralized configuration for cargo-sleek.

All configurable constants in one place for easy tuning.
Individual modules import from here for consistency.

Categories:
- Paths: Data directory and file locations
- Tool: The wrapped build tool and reserved subcommands
- Limits: Display and locking limits
- Deps / Profiler: Analyzer and profiler constants
- Settings: Optional user settings file
"""
import os
from pathlib import Path
from typing import Literal

import msgspec

# =============================================================================
# Paths
# =============================================================================

DATA_DIR = Path(os.environ.get("SLEEK_DATA_DIR", Path.home() / ".cargo-sleek"))

STATE_FILES = {
    "stats": DATA_DIR / "stats.json",
    "settings": DATA_DIR / "config.json",
    "events": DATA_DIR / "sleek-events.jsonl",
    "build_report": DATA_DIR / "build-report.txt",
}

STATS_FILE = STATE_FILES["stats"]
SETTINGS_FILE = STATE_FILES["settings"]
LOG_FILE = STATE_FILES["events"]


# =============================================================================
# Build Tool
# =============================================================================

class Tool:
    """The wrapped build tool."""
    # cargo exports $CARGO to external subcommands
    BINARY = os.environ.get("CARGO", "cargo")
    # `cargo sleek ...` invokes us as `cargo-sleek sleek ...`
    SUBCOMMAND_NAME = "sleek"
    PROGRAM_NAME = "cargo-sleek"

    # Reserved analytic subcommands, never forwarded
    ANALYTIC_COMMANDS = ("stats", "reset", "log", "time-tracker", "check-deps", "build-time")


class KeyPolicy:
    """How an invocation maps to a stats key."""
    COMMAND = "command"  # bare subcommand: "build"
    FULL = "full"  # subcommand plus arguments: "build --release"


# =============================================================================
# Limits
# =============================================================================

class Limits:
    """Display and locking limits."""
    LOG_ENTRIES_PER_COMMAND = 5
    LOCK_TIMEOUT = 10.0  # Seconds to wait for the stats lock


# =============================================================================
# Dependency Analysis
# =============================================================================

class Deps:
    """Manifest/lock file constants."""
    MANIFEST_FILE = "Cargo.toml"
    LOCK_FILE = "Cargo.lock"
    SECTION_HEADER = "[dependencies]"
    COMMENT_PREFIX = "#"


# =============================================================================
# Build Profiling
# =============================================================================

class Profiler:
    """Build profiler constants."""
    BUILD_COMMAND = "build"
    TIMINGS_FLAG = "--timings"
    SLOWEST_MARKER = "slowest"
    TARGET_DIR = Path("target") / "debug"
    REPORT_FILE = STATE_FILES["build_report"]


# =============================================================================
# Exit Codes
# =============================================================================

class Exit:
    """Process exit codes."""
    OK = 0
    FAILURE = 1  # Also used when a child reports no status
    SPAWN_FAILED = 127
    INTERRUPTED = 130


# =============================================================================
# User Settings
# =============================================================================

class Settings(msgspec.Struct):
    """Optional settings read from config.json in the data directory."""
    key_policy: Literal["command", "full"] = KeyPolicy.COMMAND
    build_tool: str = Tool.BINARY
    debug: bool = False


def load_settings(path: Path = None) -> Settings:
    """Load user settings, falling back to defaults on any problem."""
    path = path or SETTINGS_FILE
    try:
        return msgspec.json.decode(path.read_bytes(), type=Settings)
    except (OSError, msgspec.DecodeError):
        return Settings()
