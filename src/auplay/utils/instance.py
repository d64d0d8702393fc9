"""Machine-wide single instance guard."""

import os
import tempfile
from pathlib import Path
from typing import Optional
from auplay.core.exceptions import AlreadyRunningError, InstanceLockError
from auplay.utils.log import get_logger

logger = get_logger(__name__)


class InstanceLock:
    """
    Exclusive advisory lock on a file in the temp directory.

    Only one process can hold the lock for a given name. The lock is
    released by ``release()``, by leaving the ``with`` block, or by the OS
    when the process exits.
    """

    def __init__(self, name: str, directory: Optional[str] = None):
        self.path = Path(directory or tempfile.gettempdir()) / f"{name}.lock"
        self._fd: Optional[int] = None

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        """
        Take the lock without waiting.

        Raises:
            AlreadyRunningError: If another holder owns the lock.
            InstanceLockError: If the lock file cannot be opened.
        """
        if self._fd is not None:
            return

        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        except PermissionError as e:
            # A lock file we may not open belongs to another user's instance
            if self.path.is_file():
                raise AlreadyRunningError(
                    f"another auplay instance is already playing (lock: {self.path})"
                ) from e
            raise InstanceLockError(_describe(self.path, e)) from e
        except OSError as e:
            raise InstanceLockError(_describe(self.path, e)) from e

        try:
            _lock(fd)
        except OSError as e:
            os.close(fd)
            raise AlreadyRunningError(
                f"another auplay instance is already playing (lock: {self.path})"
            ) from e

        self._fd = fd
        logger.debug(f"Acquired instance lock {self.path}")

    def release(self) -> None:
        """Release the lock. Safe to call when not held."""
        if self._fd is None:
            return
        try:
            _unlock(self._fd)
        finally:
            os.close(self._fd)
            self._fd = None
        logger.debug(f"Released instance lock {self.path}")

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


def _describe(path: Path, error: OSError) -> str:
    return f"cannot open lock file '{path}': {error.strerror or error}"


if os.name == "nt":
    import msvcrt

    def _lock(fd: int) -> None:
        msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)

    def _unlock(fd: int) -> None:
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _lock(fd: int) -> None:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)

    def _unlock(fd: int) -> None:
        fcntl.flock(fd, fcntl.LOCK_UN)
