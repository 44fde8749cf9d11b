"""
Per-toolchain driver cache.

DriverCacheManager is the entry point of the package. Given a toolchain it
returns the path of an up-to-date driver, building the driver first when the
cached copy is missing or outdated.

Example:
    >>> from dylint_drivers.driver import DriverCacheManager
    >>> manager = DriverCacheManager.from_config()
    >>> manager.get("nightly-2023-01-19")
    PosixPath('/home/user/.dylint_drivers/nightly-2023-01-19/dylint-driver')
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from dylint_drivers import __version__
from dylint_drivers.core.directory import resolve_drivers_dir
from dylint_drivers.core.exceptions import CacheIOError
from dylint_drivers.core.filesystem import EXE_SUFFIX, ensure_directory
from dylint_drivers.core.locking import LockManager
from dylint_drivers.core.process import SubprocessRunner
from dylint_drivers.driver.builder import DriverBuilder
from dylint_drivers.driver.staleness import StalenessChecker
from dylint_drivers.toolchain.cargo import Cargo
from dylint_drivers.toolchain.rustup import Rustup

if TYPE_CHECKING:
    from dylint_drivers.config.parser import DriverCacheConfig

logger = logging.getLogger(__name__)

DRIVER_NAME = "dylint-driver"


class DriverCacheManager:
    """
    Maps toolchains to cached, up-to-date driver binaries.

    Attributes:
        drivers_dir: Resolved root of the cache
        builder: Builds a driver into a cache slot
        checker: Decides whether a cached driver is outdated
        lock_manager: Serializes check-then-build per toolchain across processes
        quiet: Whether builds discard diagnostics unless a call says otherwise
    """

    def __init__(
        self,
        drivers_dir: Path,
        builder: DriverBuilder,
        checker: StalenessChecker,
        lock_manager: Optional[LockManager] = None,
        quiet: bool = False,
    ):
        self.drivers_dir = Path(drivers_dir)
        self.builder = builder
        self.checker = checker
        self.lock_manager = lock_manager if lock_manager is not None else LockManager()
        self.quiet = quiet

    @classmethod
    def from_config(
        cls, config: Optional["DriverCacheConfig"] = None
    ) -> "DriverCacheManager":
        """
        Create a manager wired to the real cargo and rustup executables.

        Args:
            config: DriverCacheConfig (default: load_config())

        Raises:
            ConfigurationError: If the configuration or drivers directory is invalid
            CacheIOError: If the default drivers directory cannot be created
        """
        if config is None:
            from dylint_drivers.config.parser import load_config

            config = load_config()

        runner = SubprocessRunner()
        rustup = Rustup(runner, program=config.rustup)
        cargo = Cargo(runner, program=config.cargo)

        return cls(
            drivers_dir=resolve_drivers_dir(config.driver_path),
            builder=DriverBuilder(
                __version__,
                build_mode=config.build_mode(),
                runner=runner,
                rustup=rustup,
                cargo=cargo,
            ),
            checker=StalenessChecker(__version__, runner=runner, rustup=rustup),
            lock_manager=LockManager(timeout=config.lock_timeout),
            quiet=config.quiet,
        )

    def driver_dir(self, toolchain: str) -> Path:
        return self.drivers_dir / toolchain

    def driver_path(self, toolchain: str) -> Path:
        return self.driver_dir(toolchain) / f"{DRIVER_NAME}{EXE_SUFFIX}"

    def get(self, toolchain: str, quiet: Optional[bool] = None) -> Path:
        """
        Return the path of an up-to-date driver for a toolchain.

        Args:
            toolchain: Toolchain identifier, e.g. 'nightly-2023-01-19'
            quiet: Discard build diagnostics if a build is needed
                (default: the manager's quiet setting)

        Returns:
            Path to the cached driver

        Raises:
            CacheIOError: If the toolchain's cache directory cannot be created
            DylintDriverError: Any failure from checking or building, unchanged
        """
        if quiet is None:
            quiet = self.quiet

        driver_dir = self.driver_dir(toolchain)
        try:
            ensure_directory(driver_dir)
        except OSError as e:
            raise CacheIOError(f"Failed to create directory {driver_dir}: {e}") from e

        driver = self.driver_path(toolchain)
        with self.lock_manager.driver_lock(driver_dir, toolchain):
            if not driver.exists():
                logger.debug(f"No cached driver for {toolchain}")
                self.builder.build(toolchain, driver, quiet=quiet)
            elif self.checker.is_outdated(toolchain, driver):
                self.builder.build(toolchain, driver, quiet=quiet)
            else:
                logger.debug(f"Using cached driver for {toolchain}: {driver}")

        return driver


__all__ = ["DRIVER_NAME", "DriverCacheManager"]
