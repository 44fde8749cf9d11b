"""Configuration loading for dylint-drivers."""

from dylint_drivers.config.parser import (
    CONFIG_PATH_ENV,
    DriverCacheConfig,
    load_config,
)

__all__ = ["CONFIG_PATH_ENV", "DriverCacheConfig", "load_config"]
