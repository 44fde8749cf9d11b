"""
Cargo integration for building drivers.

Only two cargo operations are needed: learning where a package's build
artifacts land, and building the package.
"""

import json
import logging
from pathlib import Path
from typing import Mapping, Optional

from dylint_drivers.core.exceptions import CommandError
from dylint_drivers.core.process import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class Cargo:
    """Thin wrapper over the `cargo` executable."""

    def __init__(self, runner: Optional[CommandRunner] = None, program: str = "cargo"):
        self.runner = runner if runner is not None else SubprocessRunner()
        self.program = program

    def target_directory(self, package_dir: Path, env: Mapping[str, str]) -> Path:
        """
        Ask cargo where build artifacts for a package will be written.

        Uses `cargo metadata --no-deps`, which reads the manifest without
        resolving or fetching dependencies.

        Args:
            package_dir: Directory containing Cargo.toml
            env: Complete environment for cargo

        Returns:
            The package's target directory

        Raises:
            CommandError: If cargo fails or prints unexpected output
        """
        cmd = [self.program, "metadata", "--no-deps", "--format-version", "1"]
        result = self.runner.run(cmd, cwd=package_dir, env=env)
        if not result.success:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise CommandError(
                f"cargo metadata failed with exit code {result.returncode} "
                f"in {package_dir}\n{stderr}"
            )

        try:
            metadata = json.loads(result.stdout.decode("utf-8"))
            target_directory = metadata["target_directory"]
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as e:
            raise CommandError(
                f"Could not read target directory from cargo metadata: {e}"
            ) from e

        logger.debug(f"Target directory for {package_dir}: {target_directory}")
        return Path(target_directory)

    def build(self, package_dir: Path, env: Mapping[str, str], quiet: bool = False) -> int:
        """
        Run `cargo build` in a package and return its exit status.

        Build output is not captured; with quiet, stderr is discarded.
        """
        result = self.runner.run(
            [self.program, "build"],
            cwd=package_dir,
            env=env,
            capture_output=False,
            quiet=quiet,
        )
        return result.returncode


__all__ = ["Cargo"]
