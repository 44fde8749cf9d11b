"""
Core functionality for dylint-drivers.

This package contains the foundational modules that the driver cache
depends on.
"""

from .directory import (
    DRIVER_PATH_ENV,
    get_default_drivers_dir,
    get_driver_path_override,
    resolve_drivers_dir,
)

from .locking import LockManager

from .process import (
    CommandResult,
    CommandRunner,
    SubprocessRunner,
)

from .exceptions import (
    DylintDriverError,
    ConfigurationError,
    CacheIOError,
    CacheLockTimeout,
    CommandError,
    CommandLaunchError,
    BuildError,
    DriverVersionError,
    ToolchainNotFoundError,
)

__all__ = [
    "DRIVER_PATH_ENV",
    "get_default_drivers_dir",
    "get_driver_path_override",
    "resolve_drivers_dir",
    "LockManager",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "DylintDriverError",
    "ConfigurationError",
    "CacheIOError",
    "CacheLockTimeout",
    "CommandError",
    "CommandLaunchError",
    "BuildError",
    "DriverVersionError",
    "ToolchainNotFoundError",
]
