"""
Mock implementations for testing dylint-drivers components.

This package provides scripted stand-ins for external processes so that
driver builds and version checks can be tested without a Rust toolchain.
"""

from .process import FakeRunner, RecordedCall, respond
from .rust import (
    FAKE_DRIVER_MAGIC,
    TOOLCHAIN,
    FakeRustEnvironment,
    read_fake_driver_version,
    write_fake_driver,
)

__all__ = [
    "FakeRunner",
    "RecordedCall",
    "respond",
    "FAKE_DRIVER_MAGIC",
    "TOOLCHAIN",
    "FakeRustEnvironment",
    "read_fake_driver_version",
    "write_fake_driver",
]
