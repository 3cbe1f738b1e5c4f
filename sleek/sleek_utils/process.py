"""
Process capability - the single seam through which the build tool is run.

Executor and profiler only talk to a Process, so tests can substitute a
scripted implementation without spawning anything.
"""
import subprocess
from dataclasses import dataclass

from sleek.config import Tool


class SpawnError(Exception):
    """The build tool could not be started at all."""

    def __init__(self, argv: list[str], cause: OSError):
        self.argv = argv
        self.cause = cause
        super().__init__(f"failed to run {argv[0]!r}: {cause.strerror or cause}")


@dataclass
class ProcessResult:
    """Outcome of a captured run."""
    returncode: int | None
    output: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def exit_status(returncode: int) -> int | None:
    """Map a Popen returncode to an exit status; None when killed by a signal."""
    return returncode if returncode >= 0 else None


class Process:
    """Runs the build tool synchronously. No timeouts: a hung child blocks us."""

    def __init__(self, program: str = Tool.BINARY):
        self.program = program

    def argv(self, name: str, args: list[str]) -> list[str]:
        return [self.program, name, *args]

    def spawn(self, name: str, args: list[str]) -> int | None:
        """Run with inherited stdin/stdout/stderr and return the exit status."""
        argv = self.argv(name, args)
        try:
            completed = subprocess.run(argv)
        except OSError as e:
            raise SpawnError(argv, e) from e
        return exit_status(completed.returncode)

    def capture(self, name: str, args: list[str]) -> ProcessResult:
        """Run with stdout and stderr merged into one captured string."""
        argv = self.argv(name, args)
        try:
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise SpawnError(argv, e) from e
        return ProcessResult(exit_status(completed.returncode), completed.stdout or "")
