"""
dylint-drivers: per-toolchain cache of Dylint compiler drivers.

Usage:
    from dylint_drivers import get_driver

    driver = get_driver("nightly-2023-01-19")
"""

from pathlib import Path
from typing import Optional

# Drivers are built against the `dylint_driver` crate of exactly this version,
# and cached drivers older than it are rebuilt.
__version__ = "2.1.11"


def get_driver(toolchain: str, quiet: Optional[bool] = None) -> Path:
    """
    Return the path of an up-to-date driver for a toolchain.

    Configuration is read from DYLINT_DRIVER_CONFIG and DYLINT_DRIVER_PATH.
    `quiet` defaults to the configuration's `quiet` setting.
    """
    from dylint_drivers.driver.cache import DriverCacheManager

    return DriverCacheManager.from_config().get(toolchain, quiet=quiet)


__all__ = ["__version__", "get_driver"]
