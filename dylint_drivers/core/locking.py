"""
Concurrent access control for the drivers cache.

Two processes asking for the same toolchain's driver at the same time would
otherwise both build it and both copy into the same cache slot. A file lock
per toolchain directory serializes the check-then-build sequence across
processes, so the second caller finds the first caller's fresh driver.

Usage:
    from dylint_drivers.core.locking import LockManager

    lock_manager = LockManager()
    with lock_manager.driver_lock(driver_dir, "nightly-2023-01-19"):
        # Check the cached driver and rebuild it if needed
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from dylint_drivers.core.exceptions import CacheLockTimeout

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".dylint-driver.lock"


class LockManager:
    """
    Manages per-toolchain build locks.

    Uses file-based locking with the `filelock` library for cross-platform
    compatibility and automatic release on process death.

    Attributes:
        timeout: Seconds to wait for a lock; a negative value waits forever
    """

    def __init__(self, timeout: float = -1):
        """
        Initialize lock manager.

        Args:
            timeout: Maximum wait time in seconds (default: wait forever,
                matching the blocking behavior of the build itself)
        """
        self.timeout = timeout

    @contextmanager
    def driver_lock(self, driver_dir: Path, toolchain: str) -> Iterator[None]:
        """
        Acquire the build lock for one toolchain's cache directory.

        Args:
            driver_dir: The toolchain's directory inside the drivers cache
            toolchain: Toolchain identifier, used in messages

        Yields:
            None

        Raises:
            CacheLockTimeout: If lock can't be acquired within timeout
        """
        lock_path = Path(driver_dir) / LOCK_FILE_NAME
        lock = FileLock(lock_path, timeout=self.timeout)

        try:
            with lock:
                logger.debug(f"Acquired driver lock: {lock_path}")
                yield
                logger.debug(f"Released driver lock: {lock_path}")
        except Timeout as e:
            logger.error(
                f"Could not acquire driver lock for {toolchain} after {self.timeout}s"
            )
            raise CacheLockTimeout(
                f"Could not acquire driver lock for {toolchain} after {self.timeout}s. "
                "Another process may be building this driver."
            ) from e


__all__ = ["LOCK_FILE_NAME", "LockManager"]
