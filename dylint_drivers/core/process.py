"""
Process spawning for dylint-drivers.

All external commands (cargo, rustup and cached drivers) go through a
CommandRunner. The environment is always passed as a complete mapping, so
what a child process sees is exactly what the caller computed. Tests
substitute a scripted runner instead of spawning real processes.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence, Union

from dylint_drivers.core.exceptions import CommandLaunchError

logger = logging.getLogger(__name__)

Arg = Union[str, Path]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Anything that can run a command and report its outcome."""

    def run(
        self,
        args: Sequence[Arg],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        capture_output: bool = True,
        quiet: bool = False,
    ) -> CommandResult: ...


class SubprocessRunner:
    """
    CommandRunner backed by subprocess.run.

    Commands block until they exit; no timeout is applied.
    """

    def run(
        self,
        args: Sequence[Arg],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        capture_output: bool = True,
        quiet: bool = False,
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Program followed by its arguments
            cwd: Working directory for the child
            env: Complete environment for the child (default: inherit)
            capture_output: Capture stdout/stderr instead of inheriting them
            quiet: Discard stderr (takes precedence over capturing it)

        Returns:
            CommandResult with exit status and captured bytes

        Raises:
            CommandLaunchError: If the program cannot be started
        """
        cmd = [str(arg) for arg in args]
        stdout = subprocess.PIPE if capture_output else None
        if quiet:
            stderr = subprocess.DEVNULL
        else:
            stderr = subprocess.PIPE if capture_output else None

        logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd})")
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                stdout=stdout,
                stderr=stderr,
                check=False,
            )
        except OSError as e:
            raise CommandLaunchError(cmd[0], str(e)) from e

        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or b"",
            stderr=completed.stderr or b"",
        )


__all__ = ["CommandResult", "CommandRunner", "SubprocessRunner"]
