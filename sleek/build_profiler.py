"""
Build profiler - times a `cargo build --timings` run.

Measures wall-clock duration whatever the build outcome, keeps the raw
output of successful builds in a report file, and surfaces the last
output line mentioning the slowest unit.
"""
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from sleek.config import Profiler
from sleek.sleek_utils import Process, SpawnError, atomic_write_text, log_event, warn

COMPONENT = "build_profiler"


class ProfilingError(Exception):
    """The build tool could not be started."""


@dataclass
class BuildTiming:
    """Result of one profiled build."""
    duration: float  # seconds
    returncode: int | None
    report_text: str
    slowest_unit: str | None = None
    artifact_size: int = 0
    report_path: Path | None = None

    @property
    def success(self) -> bool:
        return self.returncode == 0


def find_slowest_unit(output: str, marker: str = Profiler.SLOWEST_MARKER) -> str | None:
    """Return the last output line containing marker, stripped."""
    slowest = None
    for line in output.splitlines():
        if marker in line:
            slowest = line.strip()
    return slowest


def directory_size(path: Path) -> int:
    """Total size in bytes of regular files under path; 0 if it does not exist."""
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            try:
                total += os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
    return total


def format_bytes(n: int) -> str:
    """Format byte count for display."""
    if n >= 1024 ** 3:
        return f"{n / 1024 ** 3:.1f} GB"
    elif n >= 1024 ** 2:
        return f"{n / 1024 ** 2:.1f} MB"
    elif n >= 1024:
        return f"{n / 1024:.1f} KB"
    return f"{n} B"


class BuildProfiler:
    """Profile a build through the Process capability.

    Args:
        process: Process used to run the build tool
        target_dir: Build artifact directory measured after success
        report_path: Where the raw output of a successful build is saved
    """

    def __init__(
        self,
        process: Process,
        target_dir: Path = Profiler.TARGET_DIR,
        report_path: Path = Profiler.REPORT_FILE,
    ):
        self.process = process
        self.target_dir = Path(target_dir)
        self.report_path = Path(report_path)

    def analyze(self, verbose: bool = False) -> BuildTiming:
        """Run the build once and measure it.

        A failed build is a successful measurement; only a build tool that
        cannot be started raises.

        Raises:
            ProfilingError: if the build tool cannot be spawned
        """
        start = time.perf_counter()
        try:
            result = self.process.capture(Profiler.BUILD_COMMAND, [Profiler.TIMINGS_FLAG])
        except SpawnError as e:
            log_event(COMPONENT, "spawn_failed", {"argv": e.argv, "error": str(e)}, "error")
            raise ProfilingError(str(e)) from e
        duration = time.perf_counter() - start

        if verbose and result.output:
            sys.stdout.write(result.output if result.output.endswith("\n") else result.output + "\n")

        timing = BuildTiming(
            duration=duration,
            returncode=result.returncode,
            report_text=result.output,
            slowest_unit=find_slowest_unit(result.output),
        )

        if timing.success:
            timing.artifact_size = directory_size(self.target_dir)
            if atomic_write_text(self.report_path, result.output):
                timing.report_path = self.report_path
            else:
                warn(f"could not save build report to {self.report_path}")

        log_event(COMPONENT, "profiled", {
            "duration_s": round(duration, 3),
            "returncode": timing.returncode,
            "artifact_size": timing.artifact_size,
            "slowest_unit": timing.slowest_unit,
        })
        return timing
