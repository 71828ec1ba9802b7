import sys

import pytest

from pgautoupgrade.errors import ConversionError, UpgraderError
from pgautoupgrade.services.command_runner import CommandRunner


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def test_command_runner_raises_with_stderr():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpgraderError, match="boom"):
        runner.run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(1)"],
            capture_output=True,
        )


def test_command_runner_feeds_stdin_and_uses_cwd(tmp_path):
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run(
        [sys.executable, "-c", "import os, sys; print(sys.stdin.read(), os.getcwd())"],
        capture_output=True,
        input_text="SHOW LC_COLLATE",
        cwd=str(tmp_path),
    )

    assert result.stdout.startswith("SHOW LC_COLLATE")
    assert str(tmp_path.resolve()) in result.stdout


def test_command_runner_raises_requested_error_class():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(ConversionError, match="Command failed"):
        runner.run([sys.executable, "-c", "import sys; sys.exit(3)"], error_cls=ConversionError)


def test_command_runner_reports_missing_binary(tmp_path):
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(UpgraderError, match="Required command not found"):
        runner.run([str(tmp_path / "missing-binary")])
