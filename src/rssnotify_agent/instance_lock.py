"""Single-instance guard based on an advisory file lock."""

import fcntl
import os
from pathlib import Path


class InstanceLockError(Exception):
    """Raised when another agent already holds the lock."""


class InstanceLock:
    """Exclusive, non-blocking lock held for the lifetime of the process."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fd: int | None = None

    def acquire(self) -> None:
        """Take the lock or fail immediately.

        Raises:
            InstanceLockError: If another process holds the lock.
        """
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o600)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            os.close(fd)
            raise InstanceLockError(
                "only one instance of rssnotify at a time is allowed"
            )
        self._fd = fd

    def release(self) -> None:
        if self._fd is not None:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> "InstanceLock":
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
