"""
Build descriptor generation for driver packages.

A driver is an ordinary Cargo binary package whose main function forwards
into the `dylint_driver` library. This module renders the package's files
for one toolchain and writes them into a build workspace.

Generated layout:
    <package>/
        Cargo.toml      : depends on dylint_driver pinned to our exact version
        rust-toolchain  : selects the toolchain plus rustc-dev components
        src/main.rs     : initializes logging and calls dylint_driver
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dylint_drivers.core.exceptions import CacheIOError


class BuildModeKind(Enum):
    """Where the `dylint_driver` dependency of a driver comes from."""

    RELEASE = "release"  # crates.io, exact version
    LOCAL = "local"  # exact version plus a path to a source checkout


@dataclass(frozen=True)
class BuildMode:
    """
    Source of the `dylint_driver` dependency, chosen once at startup.

    Attributes:
        kind: Release or local-development mode
        driver_path: Path to the `driver` crate checkout (local mode only)
    """

    kind: BuildModeKind = BuildModeKind.RELEASE
    driver_path: Optional[Path] = None

    def __post_init__(self):
        if self.kind is BuildModeKind.LOCAL and self.driver_path is None:
            raise ValueError("Local build mode requires a driver_path")
        if self.kind is BuildModeKind.RELEASE and self.driver_path is not None:
            raise ValueError("Release build mode does not take a driver_path")

    @classmethod
    def release(cls) -> "BuildMode":
        return cls()

    @classmethod
    def local(cls, driver_path: Path) -> "BuildMode":
        return cls(kind=BuildModeKind.LOCAL, driver_path=Path(driver_path))

    @property
    def is_local(self) -> bool:
        return self.kind is BuildModeKind.LOCAL


MAIN_RS = r"""
use anyhow::Result;
use std::env;
use std::ffi::OsString;

pub fn main() -> Result<()> {
    env_logger::init();

    let args: Vec<_> = env::args().map(OsString::from).collect();

    dylint_driver::dylint_driver(&args)
}
"""


def package_name(toolchain: str) -> str:
    """Cargo package (and binary) name of the driver for a toolchain."""
    return f"dylint_driver-{toolchain}"


def dylint_driver_spec(version: str, build_mode: BuildMode) -> str:
    """
    Render the inline table body for the `dylint_driver` dependency.

    Example:
        >>> dylint_driver_spec("2.1.11", BuildMode.release())
        'version = "=2.1.11"'
    """
    spec = f'version = "={version}"'
    if build_mode.is_local:
        # TOML basic strings treat backslash as an escape
        path = str(build_mode.driver_path).replace("\\", "\\\\")
        spec += f', path = "{path}"'
    return spec


def cargo_toml(toolchain: str, driver_spec: str) -> str:
    return f"""
[package]
name = "{package_name(toolchain)}"
version = "0.1.0"
edition = "2018"

[dependencies]
anyhow = "1.0.38"
env_logger = "0.8.3"
dylint_driver = {{ {driver_spec} }}
"""


def rust_toolchain(toolchain: str) -> str:
    return f"""
[toolchain]
channel = "{toolchain}"
components = ["llvm-tools-preview", "rustc-dev"]
"""


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise CacheIOError(f"Failed to write {path}: {e}") from e


def initialize_package(
    toolchain: str,
    package_dir: Path,
    version: str,
    build_mode: Optional[BuildMode] = None,
) -> None:
    """
    Write a driver package for a toolchain into a workspace directory.

    Args:
        toolchain: Toolchain the driver is built for
        package_dir: Existing, empty workspace directory
        version: Exact `dylint_driver` version to depend on
        build_mode: Dependency source (default: release)

    Raises:
        CacheIOError: If a file or directory cannot be created. Files already
            written are left behind; the workspace is discarded anyway.
    """
    if build_mode is None:
        build_mode = BuildMode.release()

    package_dir = Path(package_dir)
    _write(
        package_dir / "Cargo.toml",
        cargo_toml(toolchain, dylint_driver_spec(version, build_mode)),
    )
    _write(package_dir / "rust-toolchain", rust_toolchain(toolchain))

    src = package_dir / "src"
    try:
        src.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheIOError(f"Failed to create directory {src}: {e}") from e
    _write(src / "main.rs", MAIN_RS)


__all__ = [
    "BuildModeKind",
    "BuildMode",
    "MAIN_RS",
    "package_name",
    "dylint_driver_spec",
    "cargo_toml",
    "rust_toolchain",
    "initialize_package",
]
