import os

import pytest

from pgautoupgrade.errors import StagingCreationError
from pgautoupgrade.models import UpgradeContext
from pgautoupgrade.services.filesystem import FileSystemService, OperationResult
from pgautoupgrade.services.staging import StagingService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None

    def error(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def _context(data_dir) -> UpgradeContext:
    return UpgradeContext(
        data_dir=str(data_dir),
        target_version="16",
        postgres_user="postgres",
        target_bin_dir="/usr/local/bin",
    )


def _service():
    filesystem = FileSystemService(logger=DummyLogger(), console=DummyConsole())
    return StagingService(DummyLogger(), DummyConsole(), filesystem)


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "PG_VERSION").write_text("11\n", encoding="utf-8")
    (tmp_path / "global").mkdir()
    (tmp_path / "global" / "pg_control").write_bytes(b"\x00\x01")
    return tmp_path


def test_stage_moves_live_data_into_old(data_dir):
    service = _service()

    service.stage(_context(data_dir))

    assert sorted(os.listdir(data_dir)) == ["new", "old"]
    assert sorted(os.listdir(data_dir / "old")) == ["PG_VERSION", "global"]
    assert os.listdir(data_dir / "new") == []
    assert (data_dir / "old").stat().st_mode & 0o777 == 0o700
    assert (data_dir / "new").stat().st_mode & 0o777 == 0o700


def test_new_creation_failure_rolls_back(data_dir, monkeypatch):
    service = _service()
    context = _context(data_dir)
    original_make_dir = service.filesystem.make_dir

    def failing_make_dir(path):
        if path == context.new_dir:
            return OperationResult("mkdir", path, error="Permission denied")
        return original_make_dir(path)

    monkeypatch.setattr(service.filesystem, "make_dir", failing_make_dir)

    with pytest.raises(StagingCreationError) as error:
        service.stage(context)

    assert error.value.exit_code == 8
    assert sorted(os.listdir(data_dir)) == ["PG_VERSION", "global"]
    assert (data_dir / "global" / "pg_control").read_bytes() == b"\x00\x01"


def test_partial_move_into_old_is_undone(data_dir, monkeypatch):
    service = _service()
    context = _context(data_dir)

    def partial_move(source, destination, exclude=()):
        os.rename(os.path.join(source, "PG_VERSION"), os.path.join(destination, "PG_VERSION"))
        return OperationResult("move", destination, error="disk full", moved=["PG_VERSION"])

    monkeypatch.setattr(service.filesystem, "move_contents", partial_move)

    with pytest.raises(StagingCreationError) as error:
        service.stage_old(context)

    assert error.value.exit_code == 7
    assert sorted(os.listdir(data_dir)) == ["PG_VERSION", "global"]


def test_failed_restore_keeps_old_directory(data_dir, monkeypatch):
    service = _service()
    context = _context(data_dir)
    service.stage_old(context)
    monkeypatch.setattr(
        service.filesystem,
        "move_contents",
        lambda *args, **kwargs: OperationResult("move", context.data_dir, error="busy"),
    )

    result = service.rollback(context)

    assert not result.ok
    assert (data_dir / "old" / "PG_VERSION").exists()


def test_new_creation_failure_reports_failed_restore(data_dir, monkeypatch):
    service = _service()
    context = _context(data_dir)
    original_make_dir = service.filesystem.make_dir
    original_move_contents = service.filesystem.move_contents

    def failing_make_dir(path):
        if path == context.new_dir:
            return OperationResult("mkdir", path, error="Permission denied")
        return original_make_dir(path)

    def failing_restore(source, destination, exclude=()):
        if source == context.old_dir:
            return OperationResult("move", destination, error="Read-only file system")
        return original_move_contents(source, destination, exclude)

    monkeypatch.setattr(service.filesystem, "make_dir", failing_make_dir)
    monkeypatch.setattr(service.filesystem, "move_contents", failing_restore)

    with pytest.raises(StagingCreationError) as error:
        service.stage(context)

    assert error.value.exit_code == 8
    assert "could not be moved back" in str(error.value)
    assert context.old_dir in str(error.value)
    assert "were moved back" not in str(error.value)
    assert sorted(os.listdir(data_dir / "old")) == ["PG_VERSION", "global"]
