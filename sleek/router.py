"""
Command router - built-in analytic subcommands vs. passthrough.

Analytic names are reserved (Tool.ANALYTIC_COMMANDS); every other first
token goes to the build tool untouched, together with all the arguments
after it.
"""
import argparse
from pathlib import Path

from sleek.build_profiler import BuildProfiler, ProfilingError, format_bytes
from sleek.config import Deps, Exit, Tool
from sleek.deps_analyzer import DependencyAnalyzer
from sleek.executor import CommandExecutor
from sleek.sleek_utils import error, log_event
from sleek.stats_store import StatsStore

COMPONENT = "router"

PARSER_FLAGS = ("-h", "--help", "--version")


class CommandRouter:
    """Dispatch an argument vector to exactly one handler."""

    # Subcommand -> handler method
    HANDLERS: dict[str, str] = {
        "stats": "show_stats",
        "reset": "reset_stats",
        "log": "show_log",
        "time-tracker": "show_times",
        "check-deps": "check_deps",
        "build-time": "build_time",
    }

    def __init__(
        self,
        parser: argparse.ArgumentParser,
        store: StatsStore,
        executor: CommandExecutor,
        profiler: BuildProfiler,
        analyzer: DependencyAnalyzer = None,
    ):
        self.parser = parser
        self.store = store
        self.executor = executor
        self.profiler = profiler
        self.analyzer = analyzer or DependencyAnalyzer()

    def is_analytic(self, token: str) -> bool:
        return token in self.HANDLERS

    def route(self, argv: list[str]) -> int:
        """Route argv and return the exit code."""
        argv = list(argv)
        if argv and argv[0] == Tool.SUBCOMMAND_NAME:
            argv = argv[1:]

        if not argv:
            self.parser.print_help()
            return Exit.OK

        command, rest = argv[0], argv[1:]
        if not self.is_analytic(command) and command not in PARSER_FLAGS:
            log_event(COMPONENT, "passthrough", {"command": command, "args": len(rest)}, "debug")
            return self.executor.execute(command, rest)

        # -h/--help/--version print and raise SystemExit(0) here
        args = self.parser.parse_args(argv)
        log_event(COMPONENT, "builtin", {"command": command}, "debug")
        handler = getattr(self, self.HANDLERS[command])
        return handler(args)

    # =========================================================================
    # Handlers
    # =========================================================================

    def show_stats(self, args: argparse.Namespace) -> int:
        self.store.show()
        return Exit.OK

    def reset_stats(self, args: argparse.Namespace) -> int:
        self.store.reset(confirmed=args.force)
        return Exit.OK

    def show_log(self, args: argparse.Namespace) -> int:
        self.store.show_log(limit=args.limit)
        return Exit.OK

    def show_times(self, args: argparse.Namespace) -> int:
        self.store.show_durations()
        return Exit.OK

    def check_deps(self, args: argparse.Namespace) -> int:
        manifest = Path(args.manifest_path)
        lock = Path(args.lock_path) if args.lock_path else manifest.with_name(Deps.LOCK_FILE)

        print("Analyzing dependencies...")
        try:
            unused = self.analyzer.check_files(manifest, lock)
        except FileNotFoundError as e:
            error(f"{e.filename} not found")
            if Path(e.filename) == lock:
                print("Run `cargo generate-lockfile` to create it.")
            return Exit.FAILURE
        except OSError as e:
            error(f"cannot read {e.filename}: {e.strerror}")
            return Exit.FAILURE

        if unused:
            print("Possibly unused dependencies:")
            for name in unused:
                print(f"  - {name}")
        else:
            print("No unused dependencies found.")
        print("Note: this only checks that each dependency appears in the lock file.")
        return Exit.OK

    def build_time(self, args: argparse.Namespace) -> int:
        print("Profiling build...")
        try:
            timing = self.profiler.analyze(verbose=args.verbose)
        except ProfilingError as e:
            error(str(e))
            return Exit.FAILURE

        if not timing.success:
            status = "no status" if timing.returncode is None else f"exit code {timing.returncode}"
            print(f"Build failed ({status}) after {timing.duration:.2f}s")
            return Exit.OK

        print(f"Build finished in {timing.duration:.2f}s")
        print(f"Artifact size: {format_bytes(timing.artifact_size)}")
        if timing.slowest_unit:
            print(f"Slowest unit: {timing.slowest_unit}")
        if timing.report_path:
            print(f"Build report saved to {timing.report_path}")
        return Exit.OK
