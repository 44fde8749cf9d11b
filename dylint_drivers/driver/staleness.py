"""
Staleness detection for cached drivers.

A cached driver is asked for its version with `-V`. The driver is outdated
when that version is older than the running package's own version under
semver precedence, so `2.1.11-1` is older than `2.1.11`. A driver whose
version cannot be determined, or is not strict semver (`3.0`, `v3.0`), is
also treated as outdated, so a corrupt or foreign file in the cache is
replaced by the next build.
"""

import logging
from pathlib import Path
from typing import Optional

import semver

from dylint_drivers.core.exceptions import (
    CommandError,
    CommandLaunchError,
    DriverVersionError,
)
from dylint_drivers.core.process import CommandRunner, SubprocessRunner
from dylint_drivers.toolchain.rustup import Rustup, driver_environment

logger = logging.getLogger(__name__)

VERSION_FLAG = "-V"


def parse_driver_version(stdout: bytes) -> str:
    """
    Extract the version token from a driver's `-V` output.

    The token is whatever follows the last space once trailing whitespace
    is stripped, e.g. ``b"dylint-driver 2.1.11\\n"`` gives ``"2.1.11"``.

    Raises:
        CommandError: If the output is not UTF-8 or has no space-delimited token
    """
    try:
        text = stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CommandError(f"Driver version output is not valid UTF-8: {e}") from e

    _, sep, token = text.rstrip().rpartition(" ")
    if not sep:
        raise CommandError("Could not determine driver version")
    return token


class StalenessChecker:
    """
    Decide whether a cached driver must be rebuilt.

    Attributes:
        version: Version of the running package; drivers older than this
            are outdated
    """

    def __init__(
        self,
        version: str,
        runner: Optional[CommandRunner] = None,
        rustup: Optional[Rustup] = None,
    ):
        self.version = version
        self.runner = runner if runner is not None else SubprocessRunner()
        self.rustup = rustup if rustup is not None else Rustup(self.runner)

    def our_version(self) -> semver.Version:
        try:
            return semver.Version.parse(self.version)
        except ValueError as e:
            raise DriverVersionError(
                f"Could not parse own version '{self.version}': {e}"
            ) from e

    def is_outdated(self, toolchain: str, driver: Path) -> bool:
        """
        Check a cached driver against the running package's version.

        Args:
            toolchain: Toolchain the driver was built for
            driver: Path to the cached driver binary

        Returns:
            True if the driver is older than us or its version is unknowable

        Raises:
            CommandError: If the driver's output is not UTF-8 or has no
                version token
            DriverVersionError: If our own version is malformed
        """
        env = driver_environment(toolchain, self.rustup)
        try:
            result = self.runner.run([driver, VERSION_FLAG], env=env)
        except CommandLaunchError as e:
            logger.warning(f"Could not run driver '{driver}': {e.reason}")
            return True

        theirs = parse_driver_version(result.stdout)

        try:
            their_version = semver.Version.parse(theirs)
        except ValueError as e:
            logger.warning(f"Could not parse driver version '{theirs}': {e}")
            return True

        our_version = self.our_version()

        outdated = their_version < our_version
        if outdated:
            logger.debug(
                f"Driver {driver} is outdated ({their_version} < {our_version})"
            )
        return outdated


__all__ = ["VERSION_FLAG", "parse_driver_version", "StalenessChecker"]
