"""
Toolchain collaborators for the driver cache.

This package wraps the two external tools a driver build needs: rustup,
to locate the toolchain, and cargo, to compile the driver.
"""

from dylint_drivers.toolchain.cargo import Cargo
from dylint_drivers.toolchain.rustup import (
    RUSTFLAGS,
    RUSTUP_TOOLCHAIN,
    SANITIZED_VARIABLES,
    Rustup,
    driver_environment,
    sanitize_environment,
)

__all__ = [
    "Cargo",
    "Rustup",
    "RUSTFLAGS",
    "RUSTUP_TOOLCHAIN",
    "SANITIZED_VARIABLES",
    "driver_environment",
    "sanitize_environment",
]
