"""
Isolated driver builds.

Each build happens in a fresh temporary Cargo package that is thrown away
afterwards. The package is compiled with an absolute rpath to the
toolchain's lib directory, so the resulting binary finds the compiler's
shared libraries wherever it is later copied.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dylint_drivers.core.exceptions import BuildError, CacheIOError
from dylint_drivers.core.filesystem import EXE_SUFFIX, atomic_copy, temporary_directory
from dylint_drivers.core.process import CommandRunner, SubprocessRunner
from dylint_drivers.driver.descriptor import BuildMode, initialize_package, package_name
from dylint_drivers.toolchain.cargo import Cargo
from dylint_drivers.toolchain.rustup import RUSTFLAGS, Rustup, sanitize_environment

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "dylint_driver_"


def rpath_rustflags(toolchain_path: Path) -> str:
    """
    Linker flags embedding the toolchain's lib directory as an rpath.

    The path is absolute. A relative `-C rpath=yes` scheme produced
    `$ORIGIN/../..` entries that broke once the driver was copied into the
    cache.
    """
    return f"-C link-args=-Wl,-rpath,{toolchain_path}/lib"


def build_environment(
    toolchain_path: Path, environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Sanitized environment plus the rpath RUSTFLAGS for `cargo build`."""
    env = sanitize_environment(environ)
    env[RUSTFLAGS] = rpath_rustflags(toolchain_path)
    return env


def driver_binary_path(target_directory: Path, toolchain: str) -> Path:
    """Where cargo leaves the compiled driver inside a target directory."""
    return Path(target_directory) / "debug" / f"{package_name(toolchain)}{EXE_SUFFIX}"


class DriverBuilder:
    """
    Builds a driver for one toolchain and installs it at a given path.

    Attributes:
        version: Exact `dylint_driver` version the driver depends on
        build_mode: Where that dependency is taken from
    """

    def __init__(
        self,
        version: str,
        build_mode: Optional[BuildMode] = None,
        runner: Optional[CommandRunner] = None,
        rustup: Optional[Rustup] = None,
        cargo: Optional[Cargo] = None,
    ):
        self.version = version
        self.build_mode = build_mode if build_mode is not None else BuildMode.release()
        self.runner = runner if runner is not None else SubprocessRunner()
        self.rustup = rustup if rustup is not None else Rustup(self.runner)
        self.cargo = cargo if cargo is not None else Cargo(self.runner)

    def build(self, toolchain: str, driver: Path, quiet: bool = False) -> Path:
        """
        Build the driver for a toolchain and copy it to `driver`.

        Args:
            toolchain: Toolchain to build against
            driver: Destination path; replaced if it already exists
            quiet: Discard the build's diagnostic output

        Returns:
            The destination path

        Raises:
            ToolchainNotFoundError: If the toolchain is not installed
            BuildError: If cargo build exits with a non-zero status
            CommandError: If cargo metadata fails
            CacheIOError: If the workspace cannot be written or the binary
                cannot be copied into place
        """
        driver = Path(driver)
        logger.info(f"Building driver for toolchain {toolchain}")

        with temporary_directory(prefix=WORKSPACE_PREFIX) as package:
            initialize_package(toolchain, package, self.version, self.build_mode)

            base_env = sanitize_environment(os.environ)
            target_directory = self.cargo.target_directory(package, base_env)

            toolchain_path = self.rustup.toolchain_path(package, toolchain)
            env = build_environment(toolchain_path, base_env)

            returncode = self.cargo.build(package, env, quiet=quiet)
            if returncode != 0:
                raise BuildError(toolchain, returncode)

            binary = driver_binary_path(target_directory, toolchain)
            try:
                atomic_copy(binary, driver)
            except OSError as e:
                raise CacheIOError(
                    f"Could not copy '{binary}' to '{driver}': {e}"
                ) from e

        logger.debug(f"Installed driver for {toolchain} at {driver}")
        return driver


__all__ = [
    "WORKSPACE_PREFIX",
    "rpath_rustflags",
    "build_environment",
    "driver_binary_path",
    "DriverBuilder",
]
