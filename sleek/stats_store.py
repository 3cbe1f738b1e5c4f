"""
Usage statistics store.

Persists a mapping of command key -> UsageRecord as one JSON object.
Every update is a full read-modify-write, done under an advisory file
lock and finished with an atomic rename so concurrent invocations do not
lose updates. Nothing is cached between calls.
"""
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Callable

import msgspec
from filelock import Timeout as LockTimeout

from sleek.config import STATS_FILE, KeyPolicy, Limits
from sleek.sleek_utils import atomic_write_json, file_lock, log_event, safe_load_json, warn

COMPONENT = "stats_store"


class UsageRecord(msgspec.Struct):
    """Counter plus invocation history for one command key."""
    count: Annotated[int, msgspec.Meta(ge=1)]
    last_used: str | int = ""
    timestamps: list[str | int] = []
    durations: list[int] = []


StatsMapping = dict[str, UsageRecord]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: str | int) -> str:
    """Render an ISO-8601 string or epoch seconds as local 'YYYY-MM-DD HH:MM'.

    Offset-aware values are converted to local time; naive ones are shown as written.
    """
    try:
        if isinstance(value, int):
            moment = datetime.fromtimestamp(value)
        else:
            moment = datetime.fromisoformat(value)
            if moment.tzinfo is not None:
                moment = moment.astimezone()
    except (ValueError, OverflowError, OSError):
        return str(value)
    return moment.strftime("%Y-%m-%d %H:%M")


class StatsStore:
    """Read/write access to the usage statistics file.

    Args:
        path: Stats file location
        key_policy: KeyPolicy.COMMAND or KeyPolicy.FULL
        clock: Returns the current time, UTC by default (injectable for tests)
        out: Stream that show/reset/log output is printed to
    """

    def __init__(
        self,
        path: Path = STATS_FILE,
        key_policy: str = KeyPolicy.COMMAND,
        clock: Callable[[], datetime] = None,
        out=None,
    ):
        if key_policy not in (KeyPolicy.COMMAND, KeyPolicy.FULL):
            raise ValueError(f"unknown key policy: {key_policy!r}")
        self.path = Path(path)
        self.key_policy = key_policy
        self.clock = clock or utc_now
        self._out = out

    @property
    def out(self):
        return self._out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> StatsMapping:
        """Read the store. Missing or invalid content is an empty mapping."""
        stats = safe_load_json(self.path, {}, schema=StatsMapping)
        log_event(COMPONENT, "loaded", {"path": str(self.path), "entries": len(stats)}, "debug")
        return stats

    def save(self, stats: StatsMapping) -> bool:
        """Overwrite the store with stats. Failure is reported, never raised."""
        if atomic_write_json(self.path, stats):
            return True
        warn(f"could not save usage statistics to {self.path}")
        return False

    @contextmanager
    def locked(self):
        """Hold the store lock for one read-modify-write cycle."""
        with file_lock(self.path, timeout=Limits.LOCK_TIMEOUT):
            yield

    def _update(self, mutate: Callable[[StatsMapping], UsageRecord | None]) -> UsageRecord | None:
        try:
            with self.locked():
                stats = self.load()
                result = mutate(stats)
                self.save(stats)
                return result
        except LockTimeout:
            log_event(COMPONENT, "lock_timeout", {"path": str(self.path)}, "error")
            warn(f"usage statistics are locked by another process; not recorded ({self.path})")
            return None
        except OSError as e:
            # Lock file could not be created (e.g. unwritable data dir)
            log_event(COMPONENT, "lock_failed", {"path": str(self.path), "error": str(e)}, "error")
            warn(f"could not save usage statistics to {self.path}: {e.strerror or e}")
            return None

    # =========================================================================
    # Updates
    # =========================================================================

    def key_for(self, command: str, argv: list[str] = ()) -> str:
        """Stats key for an invocation under the configured key policy."""
        if self.key_policy == KeyPolicy.FULL and argv:
            return " ".join([command, *argv])
        return command

    def track(self, key: str, duration_ms: int = None) -> UsageRecord | None:
        """Count one invocation of key, stamping it with the current time."""
        now = self.clock().isoformat(timespec="seconds")

        def mutate(stats: StatsMapping) -> UsageRecord:
            # count constraint applies on decode only; incremented below
            record = stats.setdefault(key, UsageRecord(count=0))
            record.count += 1
            record.last_used = now
            record.timestamps.append(now)
            if duration_ms is not None:
                record.durations.append(int(duration_ms))
            return record

        record = self._update(mutate)
        if record is not None:
            log_event(COMPONENT, "tracked", {"key": key, "count": record.count})
        return record

    def record_duration(self, key: str, duration_ms: int) -> UsageRecord | None:
        """Attach an elapsed time to the latest invocation of key."""
        def mutate(stats: StatsMapping) -> UsageRecord | None:
            record = stats.get(key)
            if record is not None:
                record.durations.append(int(duration_ms))
            return record

        return self._update(mutate)

    def reset(self, confirmed: bool) -> bool:
        """Clear all statistics, only when confirmed."""
        if not confirmed:
            self._print("This will delete all recorded usage statistics.")
            self._print("Re-run with --force to confirm.")
            return False
        try:
            with self.locked():
                saved = self.save({})
        except LockTimeout:
            warn(f"usage statistics are locked by another process; not reset ({self.path})")
            return False
        except OSError as e:
            warn(f"could not reset usage statistics at {self.path}: {e.strerror or e}")
            return False
        if saved:
            log_event(COMPONENT, "reset", {"path": str(self.path)})
            self._print("Usage statistics cleared.")
        return saved

    # =========================================================================
    # Reports
    # =========================================================================

    def ranked(self) -> list[tuple[str, UsageRecord]]:
        """Records by count, highest first. Tie order is unspecified."""
        return sorted(self.load().items(), key=lambda item: item[1].count, reverse=True)

    def show(self) -> None:
        """Print the ranked usage table."""
        ranked = self.ranked()
        if not ranked:
            self._print("No usage data recorded yet.")
            return

        width = max(len(name) for name, _ in ranked)
        self._print("Most used cargo commands:")
        for rank, (name, record) in enumerate(ranked, 1):
            times = "time" if record.count == 1 else "times"
            line = f"  {rank:>3}. {name:<{width}}  {record.count:>6} {times}"
            if record.last_used:
                line += f"  (last used {format_timestamp(record.last_used)})"
            self._print(line)

    def show_log(self, limit: int = Limits.LOG_ENTRIES_PER_COMMAND) -> None:
        """Print the most recent invocation times of each command."""
        stats = self.load()
        if not stats:
            self._print("No usage data recorded yet.")
            return

        self._print("Cargo command log:")
        for name, record in stats.items():
            self._print(f"{name}:")
            recent = record.timestamps[-limit:] if limit > 0 else []
            for stamp in recent[::-1]:
                self._print(f"    {format_timestamp(stamp)}")

    def show_durations(self) -> None:
        """Print the average recorded duration of each command."""
        timed = [(name, record.durations) for name, record in self.load().items() if record.durations]
        if not timed:
            self._print("No timing data recorded yet.")
            return

        width = max(len(name) for name, _ in timed)
        self._print("Execution time tracker:")
        for name, durations in timed:
            average = sum(durations) // len(durations)
            self._print(f"  {name:<{width}}  avg {average:>8} ms  over {len(durations)} run(s)")
