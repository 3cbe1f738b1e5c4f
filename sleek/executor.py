"""
Passthrough executor - forwards a command to the build tool.

The invocation is counted before the child runs, so a command that fails
(or is interrupted) still shows up as used. Its elapsed time is attached
to the record once the child exits.
"""
import sys
import time

from sleek.config import Exit
from sleek.sleek_utils import Process, SpawnError, error, log_event
from sleek.stats_store import StatsStore

COMPONENT = "executor"


class CommandExecutor:
    """Track, spawn and wait for one passthrough command."""

    def __init__(self, store: StatsStore, process: Process):
        self.store = store
        self.process = process

    def execute(self, command: str, argv: list[str]) -> int:
        """Run `<tool> command *argv` and return its exit code.

        Exits the interpreter with Exit.SPAWN_FAILED when the tool cannot
        be started at all.
        """
        key = self.store.key_for(command, argv)
        self.store.track(key)

        start = time.perf_counter()
        try:
            status = self.process.spawn(command, list(argv))
        except SpawnError as e:
            log_event(COMPONENT, "spawn_failed", {"argv": e.argv, "error": str(e)}, "error")
            error(str(e))
            sys.exit(Exit.SPAWN_FAILED)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        self.store.record_duration(key, elapsed_ms)
        log_event(COMPONENT, "completed", {
            "command": command,
            "status": status,
            "elapsed_ms": elapsed_ms,
        })

        if status is None:
            return Exit.FAILURE
        return status
