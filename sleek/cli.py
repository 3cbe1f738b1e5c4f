"""
cargo-sleek entry point.

Usage:
    cargo sleek stats                 # Most used commands
    cargo sleek reset --force         # Clear statistics
    cargo sleek log [-n N]            # Recent invocations per command
    cargo sleek time-tracker          # Average duration per command
    cargo sleek check-deps            # Declared but unlocked dependencies
    cargo sleek build-time [-v]       # Profile `cargo build --timings`
    cargo sleek <anything else> ...   # Forwarded to cargo and tracked
"""
import argparse
import sys

from sleek import __version__
from sleek.build_profiler import BuildProfiler
from sleek.config import STATS_FILE, Deps, Exit, Limits, Settings, Tool, load_settings
from sleek.deps_analyzer import DependencyAnalyzer
from sleek.executor import CommandExecutor
from sleek.router import CommandRouter
from sleek.sleek_utils import Process, configure_logging
from sleek.stats_store import StatsStore


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Parser for the built-in subcommands (passthrough never reaches it)."""
    parser = argparse.ArgumentParser(
        prog=Tool.PROGRAM_NAME,
        description="Track and optimize cargo usage. "
                    "Unrecognized subcommands are forwarded to cargo.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Any other subcommand, e.g. `cargo sleek build --release`, "
               "is run through cargo and counted.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    subparsers.add_parser("stats", help="Show command usage stats")

    reset_parser = subparsers.add_parser("reset", help="Clear all usage stats")
    reset_parser.add_argument(
        "--force",
        action="store_true",
        help="Confirm deletion of all recorded statistics",
    )

    log_parser = subparsers.add_parser("log", help="Show command execution log")
    log_parser.add_argument(
        "-n", "--limit",
        type=positive_int,
        default=Limits.LOG_ENTRIES_PER_COMMAND,
        help="Entries to show per command (default: %(default)s)",
    )

    subparsers.add_parser("time-tracker", help="Show average execution time per command")

    deps_parser = subparsers.add_parser(
        "check-deps",
        help="Find dependencies missing from the lock file (heuristic)",
    )
    deps_parser.add_argument(
        "--manifest-path",
        default=Deps.MANIFEST_FILE,
        help="Path to Cargo.toml (default: %(default)s)",
    )
    deps_parser.add_argument(
        "--lock-path",
        default=None,
        help="Path to Cargo.lock (default: next to the manifest)",
    )

    time_parser = subparsers.add_parser("build-time", help="Profile build duration")
    time_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print the captured build output",
    )

    return parser


def create_router(settings: Settings = None) -> CommandRouter:
    """Wire the components together."""
    settings = settings or Settings()
    store = StatsStore(STATS_FILE, key_policy=settings.key_policy)
    process = Process(settings.build_tool)
    return CommandRouter(
        parser=build_parser(),
        store=store,
        executor=CommandExecutor(store, process),
        profiler=BuildProfiler(process),
        analyzer=DependencyAnalyzer(),
    )


def main(argv: list[str] = None) -> int:
    """Run one invocation and return its exit code."""
    if argv is None:
        argv = sys.argv[1:]
    settings = load_settings()
    configure_logging(debug=settings.debug)
    return create_router(settings).route(argv)


def run() -> None:
    """Console script entry point."""
    try:
        code = main()
    except KeyboardInterrupt:
        code = Exit.INTERRUPTED
    sys.exit(code)


if __name__ == "__main__":
    run()
