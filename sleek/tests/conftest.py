"""
Pytest configuration for cargo-sleek tests.

Provides a stats store in a temporary directory and a scripted stand-in
for the Process capability, so no test touches ~/.cargo-sleek or runs cargo.
"""
from datetime import datetime, timedelta

import pytest

from sleek.sleek_utils import ProcessResult, SpawnError
from sleek.stats_store import StatsStore


class FakeProcess:
    """Process substitute returning scripted results and recording calls."""

    def __init__(self, returncode: int | None = 0, output: str = "", spawn_error: OSError = None):
        self.returncode = returncode
        self.output = output
        self.spawn_error = spawn_error
        self.calls: list[tuple[str, list[str]]] = []
        self.on_spawn = None

    def _run(self, name: str, args: list[str]):
        self.calls.append((name, list(args)))
        if self.spawn_error is not None:
            raise SpawnError(["cargo", name, *args], self.spawn_error)
        if self.on_spawn is not None:
            self.on_spawn()

    def spawn(self, name: str, args: list[str]) -> int | None:
        self._run(name, args)
        return self.returncode

    def capture(self, name: str, args: list[str]) -> ProcessResult:
        self._run(name, args)
        return ProcessResult(self.returncode, self.output)


class FixedClock:
    """Clock advancing one minute per call."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 9, 30)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "data" / "stats.json"


@pytest.fixture
def store(stats_path):
    return StatsStore(stats_path, clock=FixedClock())


@pytest.fixture
def fake_process():
    return FakeProcess()
