"""
Tests for SubprocessRunner.

These spawn real (tiny) shell scripts rather than mocking subprocess, so
they only run where /bin/sh exists.
"""

import sys

import pytest

from dylint_drivers.core.exceptions import CommandLaunchError
from dylint_drivers.core.filesystem import IS_WINDOWS
from dylint_drivers.core.process import CommandResult, SubprocessRunner

pytestmark = pytest.mark.skipif(IS_WINDOWS, reason="uses POSIX shell scripts")


def make_script(path, body):
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(0o755)
    return path


class TestCommandResult:
    def test_success(self):
        assert CommandResult(returncode=0).success
        assert not CommandResult(returncode=101).success


class TestSubprocessRunner:
    """Tests for SubprocessRunner.run."""

    def test_captures_output(self, tmp_path):
        script = make_script(
            tmp_path / "tool", 'echo "dylint-driver 2.1.11"; echo oops >&2'
        )

        result = SubprocessRunner().run([script])

        assert result.returncode == 0
        assert result.stdout == b"dylint-driver 2.1.11\n"
        assert result.stderr == b"oops\n"

    def test_exit_status_reported(self, tmp_path):
        script = make_script(tmp_path / "tool", "exit 3")

        result = SubprocessRunner().run([script])

        assert result.returncode == 3
        assert not result.success

    def test_quiet_discards_stderr(self, tmp_path):
        script = make_script(tmp_path / "tool", "echo out; echo err >&2")

        result = SubprocessRunner().run([script], quiet=True)

        assert result.stdout == b"out\n"
        assert result.stderr == b""

    def test_uncaptured_output_not_collected(self, tmp_path, capfd):
        script = make_script(tmp_path / "tool", "echo streamed")

        result = SubprocessRunner().run([script], capture_output=False)

        assert result.stdout == b""
        assert "streamed" in capfd.readouterr().out

    def test_environment_is_exact(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DYLINT_TEST_INHERITED", "leaked")
        script = make_script(
            tmp_path / "tool",
            'echo "${DYLINT_TEST_INHERITED:-unset} ${DYLINT_TEST_GIVEN:-unset}"',
        )

        result = SubprocessRunner().run(
            [script], env={"DYLINT_TEST_GIVEN": "given", "PATH": "/usr/bin:/bin"}
        )

        assert result.stdout == b"unset given\n"

    def test_working_directory(self, tmp_path):
        workdir = tmp_path / "work"
        workdir.mkdir()

        result = SubprocessRunner().run(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=workdir
        )

        assert result.stdout.decode().strip() == str(workdir.resolve())

    def test_missing_program(self, tmp_path):
        missing = tmp_path / "no-such-driver"

        with pytest.raises(CommandLaunchError) as exc_info:
            SubprocessRunner().run([missing, "-V"])

        assert exc_info.value.program == str(missing)
        assert str(missing) in str(exc_info.value)

    def test_not_executable(self, tmp_path):
        garbage = tmp_path / "dylint-driver"
        garbage.write_bytes(b"\x00\x01garbage")

        with pytest.raises(CommandLaunchError):
            SubprocessRunner().run([garbage, "-V"])
