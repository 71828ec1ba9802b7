import subprocess

import pytest

from pgautoupgrade.errors import CollationProbeError
from pgautoupgrade.services.collation import CollationProbeService, parse_collation

SINGLE_USER_OUTPUT = """
PostgreSQL stand-alone backend 11.22
backend> \t 1: lc_collate\t(typeid = 25, len = -1, typmod = -1, byval = f)
\t----
\t 1: lc_collate = "en_US.utf8"\t(typeid = 25, len = -1, typmod = -1, byval = f)
\t----
backend> 
"""


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def test_parse_collation_reads_quoted_value():
    assert parse_collation(SINGLE_USER_OUTPUT) == "en_US.utf8"


def test_parse_collation_handles_c_locale():
    assert parse_collation('\t 1: lc_collate = "C"\t(typeid = 25)') == "C"


def test_parse_collation_without_result_line():
    assert parse_collation("PostgreSQL stand-alone backend 11.22\nbackend> ") is None


def test_parse_collation_rejects_empty_value():
    assert parse_collation('\t 1: lc_collate = ""\t(typeid = 25)') is None


def test_collation_read_runs_single_user_backend_against_old_directory():
    calls = []

    def fake_run_cmd(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, 0, stdout=SINGLE_USER_OUTPUT, stderr="")

    service = CollationProbeService(DummyLogger(), DummyConsole(), run_cmd=fake_run_cmd)

    collation = service.probe("/data/old", "/usr/local-pg11/bin/postgres")

    assert collation == "en_US.utf8"
    cmd, kwargs = calls[0]
    assert cmd == ["/usr/local-pg11/bin/postgres", "--single", "-D", "/data/old"]
    assert kwargs["input_text"] == "SHOW LC_COLLATE\n"
    assert kwargs["capture_output"] is True


def test_collation_read_fails_when_line_missing():
    service = CollationProbeService(
        DummyLogger(),
        DummyConsole(),
        run_cmd=lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, stdout="", stderr=""),
    )

    with pytest.raises(CollationProbeError, match="Could not determine the collation"):
        service.probe("/data/old", "/usr/local-pg11/bin/postgres")


def test_collation_read_wraps_backend_crash():
    def crashing_run_cmd(cmd, error_cls, **kwargs):
        raise error_cls("Command failed (134): postgres --single")

    service = CollationProbeService(DummyLogger(), DummyConsole(), run_cmd=crashing_run_cmd)

    with pytest.raises(CollationProbeError) as error:
        service.probe("/data/old", "/usr/local-pg11/bin/postgres")

    assert "Command failed (134)" in str(error.value)
    assert error.value.exit_code == 1
