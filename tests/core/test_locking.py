"""
Unit tests for the locking module.

Tests cover:
- Lock acquisition and release
- Timeout behavior
- Release on exceptions
"""

import pytest

from dylint_drivers.core.exceptions import CacheLockTimeout
from dylint_drivers.core.locking import LOCK_FILE_NAME, LockManager


class TestLockManager:
    """Tests for LockManager class."""

    def test_default_timeout_waits_forever(self):
        assert LockManager().timeout == -1

    def test_acquire_and_release(self, tmp_path):
        manager = LockManager(timeout=5)

        with manager.driver_lock(tmp_path, "stable"):
            assert (tmp_path / LOCK_FILE_NAME).exists()

        # Lock was released, so it can be acquired again
        with manager.driver_lock(tmp_path, "stable"):
            pass

    def test_timeout(self, tmp_path):
        manager = LockManager(timeout=5)
        contender = LockManager(timeout=0.1)

        with manager.driver_lock(tmp_path, "stable"):
            with pytest.raises(CacheLockTimeout) as exc_info:
                with contender.driver_lock(tmp_path, "stable"):
                    pass

        assert "stable" in str(exc_info.value)

    def test_released_on_exception(self, tmp_path):
        manager = LockManager(timeout=0.1)

        with pytest.raises(ValueError):
            with manager.driver_lock(tmp_path, "stable"):
                raise ValueError("build failed")

        with manager.driver_lock(tmp_path, "stable"):
            pass

    def test_separate_toolchains_do_not_contend(self, tmp_path):
        manager = LockManager(timeout=0.1)
        first = tmp_path / "nightly"
        second = tmp_path / "stable"
        first.mkdir()
        second.mkdir()

        with manager.driver_lock(first, "nightly"):
            with manager.driver_lock(second, "stable"):
                pass
