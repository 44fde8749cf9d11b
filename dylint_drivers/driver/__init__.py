"""
Driver building and caching.

This package turns a toolchain identifier into the path of a compiled,
up-to-date driver binary.
"""

from dylint_drivers.driver.descriptor import (
    BuildMode,
    BuildModeKind,
    initialize_package,
)
from dylint_drivers.driver.staleness import StalenessChecker, parse_driver_version
from dylint_drivers.driver.builder import DriverBuilder
from dylint_drivers.driver.cache import DRIVER_NAME, DriverCacheManager

__all__ = [
    "BuildMode",
    "BuildModeKind",
    "initialize_package",
    "StalenessChecker",
    "parse_driver_version",
    "DriverBuilder",
    "DRIVER_NAME",
    "DriverCacheManager",
]
