"""
Rustup integration: toolchain location and environment hygiene.

Drivers are linked against the private compiler libraries of one exact
toolchain. This module finds where rustup installed that toolchain and
prepares environments for nested cargo/rustup/driver invocations.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dylint_drivers.core.exceptions import CommandError, ToolchainNotFoundError
from dylint_drivers.core.filesystem import IS_WINDOWS
from dylint_drivers.core.process import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

RUSTFLAGS = "RUSTFLAGS"
RUSTUP_TOOLCHAIN = "RUSTUP_TOOLCHAIN"

# Variables a parent cargo/rustup sets that would redirect a nested build
# to the wrong compiler, flags or target directory.
SANITIZED_VARIABLES = (
    "CARGO",
    "CARGO_ENCODED_RUSTFLAGS",
    "CARGO_TARGET_DIR",
    "RUSTC",
    "RUSTC_WORKSPACE_WRAPPER",
    "RUSTC_WRAPPER",
    RUSTFLAGS,
    RUSTUP_TOOLCHAIN,
)


def sanitize_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Return a copy of an environment with build-redirecting variables removed.

    Args:
        environ: Environment to sanitize (default: os.environ)

    Returns:
        New dictionary; the input is left untouched.
    """
    if environ is None:
        environ = os.environ
    return {
        key: value for key, value in environ.items() if key not in SANITIZED_VARIABLES
    }


class Rustup:
    """Thin wrapper over the `rustup` executable."""

    def __init__(self, runner: Optional[CommandRunner] = None, program: str = "rustup"):
        self.runner = runner if runner is not None else SubprocessRunner()
        self.program = program

    def toolchain_path(self, package_dir: Path, toolchain: str) -> Path:
        """
        Locate the toolchain that rustup selects for a package directory.

        The package's rust-toolchain file decides the toolchain, so the
        lookup runs inside the package with RUSTUP_TOOLCHAIN removed.

        Args:
            package_dir: Directory containing a rust-toolchain file
            toolchain: Expected toolchain identifier, used in error messages

        Returns:
            Root directory of the installed toolchain

        Raises:
            ToolchainNotFoundError: If rustup cannot resolve the toolchain
        """
        return self._which_rustc(
            [self.program, "which", "rustc"], toolchain, cwd=package_dir
        )

    def toolchain_path_for(self, toolchain: str) -> Path:
        """Locate an installed toolchain by name."""
        return self._which_rustc(
            [self.program, "which", "--toolchain", toolchain, "rustc"], toolchain
        )

    def _which_rustc(
        self, args, toolchain: str, cwd: Optional[Path] = None
    ) -> Path:
        try:
            result = self.runner.run(args, cwd=cwd, env=sanitize_environment())
        except CommandError as e:
            raise ToolchainNotFoundError(toolchain, str(e)) from e

        if not result.success:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ToolchainNotFoundError(toolchain, stderr or "rustup which failed")

        try:
            stdout = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolchainNotFoundError(toolchain, f"invalid rustup output: {e}") from e

        rustc = Path(stdout.strip())
        if not stdout.strip() or len(rustc.parents) < 2:
            raise ToolchainNotFoundError(
                toolchain, f"unexpected rustc path: {stdout.strip()!r}"
            )

        # <toolchain>/bin/rustc
        path = rustc.parents[1]
        logger.debug(f"Toolchain {toolchain} is installed at {path}")
        return path


def driver_environment(
    toolchain: str,
    rustup: Rustup,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Build the environment for launching a cached driver.

    The driver is told which toolchain it belongs to. On Windows, where there
    is no rpath, the toolchain's bin directory is prepended to PATH so the
    driver can load the compiler DLLs.

    Args:
        toolchain: Toolchain the driver was built for
        rustup: Used to locate the toolchain on Windows
        environ: Base environment (default: os.environ)

    Returns:
        Complete environment for the driver process
    """
    env = sanitize_environment(environ)
    env[RUSTUP_TOOLCHAIN] = toolchain
    if IS_WINDOWS:
        bin_dir = rustup.toolchain_path_for(toolchain) / "bin"
        path = env.get("PATH", "")
        env["PATH"] = os.pathsep.join(p for p in (str(bin_dir), path) if p)
    return env


__all__ = [
    "RUSTFLAGS",
    "RUSTUP_TOOLCHAIN",
    "SANITIZED_VARIABLES",
    "sanitize_environment",
    "Rustup",
    "driver_environment",
]
