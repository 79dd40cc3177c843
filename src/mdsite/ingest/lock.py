"""Exclusive run lock: overlapping ingestion runs are rejected, not queued"""

import logging
import os
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from mdsite.errors import RunInProgress

logger = logging.getLogger(__name__)

# A run killed by its trigger deadline never reaches the finally block
DEFAULT_MAX_AGE = 60 * 60


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def _read_pid(path: Path) -> int | None:
    try:
        head = path.read_text(encoding="utf-8").split()
    except FileNotFoundError:
        return None
    try:
        return int(head[0])
    except (IndexError, ValueError):
        return None


def is_stale(path: Path, max_age: float = DEFAULT_MAX_AGE) -> bool:
    """True when the lock's owner is gone or the lock is older than max_age seconds.

    A lock whose pid cannot be read yet (the owner may be mid-write) is only
    stale by age.
    """
    try:
        age = time.time() - path.stat().st_mtime
    except FileNotFoundError:
        return True
    if age > max_age:
        return True
    pid = _read_pid(path)
    return pid is not None and not _pid_alive(pid)


def _acquire(path: Path) -> int:
    return os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)


@contextmanager
def run_lock(path: Path, max_age: float = DEFAULT_MAX_AGE) -> Iterator[Path]:
    """Hold path as a lock file for the duration of the block.

    Raises RunInProgress if a live run already holds the file. A stale lock
    (dead pid, or older than max_age seconds) is removed and taken over. The
    file is removed on exit whether the block succeeded or raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = _acquire(path)
    except FileExistsError as e:
        if not is_stale(path, max_age):
            raise RunInProgress(f"Another run holds {path}") from e
        logger.warning(f"Removing stale lock {path}")
        path.unlink(missing_ok=True)
        try:
            fd = _acquire(path)
        except FileExistsError as e2:
            raise RunInProgress(f"Another run holds {path}") from e2
    with os.fdopen(fd, "w") as f:
        f.write(f"{os.getpid()} {datetime.now(timezone.utc).isoformat()}\n")
    logger.debug(f"Acquired {path}")
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug(f"Released {path}")
