"""
Scripted process runner for testing.

FakeRunner stands in for SubprocessRunner. Tests register responders for
command prefixes; every call is recorded so tests can assert on the exact
arguments, working directory and environment a component used.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from dylint_drivers.core.exceptions import CommandLaunchError
from dylint_drivers.core.process import CommandResult


@dataclass
class RecordedCall:
    """One invocation seen by FakeRunner."""

    args: List[str]
    cwd: Optional[Path] = None
    env: Optional[Dict[str, str]] = None
    capture_output: bool = True
    quiet: bool = False

    @property
    def program(self) -> str:
        return self.args[0]


Responder = Callable[[RecordedCall], CommandResult]
Matcher = Callable[[List[str]], bool]


class FakeRunner:
    """CommandRunner that answers from registered responders."""

    def __init__(self):
        self.calls: List[RecordedCall] = []
        self._responders: List[Tuple[Matcher, Responder]] = []

    def on(self, prefix: Sequence[str], responder: Responder) -> None:
        """Answer commands whose arguments start with `prefix`."""
        prefix = [str(p) for p in prefix]
        self.on_match(lambda args: args[: len(prefix)] == prefix, responder)

    def on_match(self, matcher: Matcher, responder: Responder) -> None:
        # Later registrations win, so tests can override defaults
        self._responders.insert(0, (matcher, responder))

    def run(
        self,
        args,
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        capture_output: bool = True,
        quiet: bool = False,
    ) -> CommandResult:
        call = RecordedCall(
            args=[str(arg) for arg in args],
            cwd=Path(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            capture_output=capture_output,
            quiet=quiet,
        )
        self.calls.append(call)

        for matcher, responder in self._responders:
            if matcher(call.args):
                return responder(call)

        raise CommandLaunchError(call.program, "No such file or directory")

    def calls_to(self, *prefix: str) -> List[RecordedCall]:
        """Recorded calls whose arguments start with `prefix`."""
        return [c for c in self.calls if c.args[: len(prefix)] == list(prefix)]


def respond(
    stdout: bytes = b"", returncode: int = 0, stderr: bytes = b""
) -> Responder:
    """Responder returning a fixed result."""
    result = CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)
    return lambda call: result
