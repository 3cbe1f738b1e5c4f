"""
File I/O utilities with locking and atomic writes.

Includes:
- File locking (file_lock)
- JSON I/O (safe_load_json, atomic_write_json)
- Plain text writes (atomic_write_text)
"""
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path

import msgspec
from filelock import FileLock

from sleek.config import Limits

PathLike = str | Path


@contextmanager
def file_lock(path: PathLike, timeout: float = Limits.LOCK_TIMEOUT):
    """
    Context manager for an exclusive advisory lock on a file.

    The lock lives in a sibling "<name>.lock" file so the guarded file
    itself can be replaced by rename while the lock is held.

    Usage:
        with file_lock("/path/to/file.json", timeout=10.0):
            # perform read-modify-write

    Raises:
        filelock.Timeout: if the lock is not acquired within timeout
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with FileLock(f"{path}.lock", timeout=timeout):
        yield


def safe_load_json(path: Path, default=None, schema=None):
    """Load JSON file with graceful fallback.

    Missing, unreadable, malformed or (when schema is given) structurally
    invalid content all return default.
    """
    if default is None:
        default = {}
    try:
        content = path.read_bytes()
        if schema is None:
            return msgspec.json.decode(content)
        return msgspec.json.decode(content, type=schema)
    except (OSError, msgspec.DecodeError):
        pass  # Expected failures, treated as absent
    return default.copy() if isinstance(default, dict) else default


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def atomic_write_json(path: Path, data) -> bool:
    """
    Write JSON atomically using temp file + rename.
    Readers never observe a partially written file.

    Returns:
        True on success, False if the file could not be written
    """
    from sleek.sleek_utils.logging import log_event
    try:
        payload = msgspec.json.format(msgspec.json.encode(data), indent=2)
        _atomic_write_bytes(Path(path), payload)
        return True
    except (OSError, TypeError, msgspec.EncodeError) as e:
        log_event("atomic_write_json", "write_failed", {"path": str(path), "error": str(e)}, "error")
        return False


def atomic_write_text(path: Path, text: str) -> bool:
    """Write text atomically. Returns False if the file could not be written."""
    from sleek.sleek_utils.logging import log_event
    try:
        _atomic_write_bytes(Path(path), text.encode("utf-8"))
        return True
    except OSError as e:
        log_event("atomic_write_text", "write_failed", {"path": str(path), "error": str(e)}, "error")
        return False
