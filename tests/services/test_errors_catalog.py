import pytest

from pgautoupgrade.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("conversion_failed", old_version="12", new_version="16")

    assert "pg_upgrade from PostgreSQL 12 to 16 failed." in message
    assert "Suggested action:" in message


def test_actionable_error_rejects_unknown_key():
    with pytest.raises(KeyError):
        actionable_error("no_such_error")


def test_rollback_failure_names_both_directories():
    message = actionable_error(
        "staging_rollback_failed",
        path="/data/new",
        old_dir="/data/old",
        data_dir="/data",
    )

    assert "could not be moved back" in message
    assert "`/data/old`" in message
    assert "were moved back" not in message
