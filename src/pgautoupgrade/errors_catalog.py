"""Actionable error catalog for pgautoupgrade."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "upgrade_failed": {
        "what": "The automatic upgrade could not continue.",
        "next": "Check the log output above and fix the reported problem before restarting.",
    },
    "leftover_staging": {
        "what": "Left over {name} directory found at {path}.",
        "next": (
            "A previous upgrade was interrupted. Inspect the `old` and `new` directories, "
            "restore the data files manually and remove them before restarting."
        ),
    },
    "unrecognized_version": {
        "what": "Unknown version of PostgreSQL database files found: {version}.",
        "next": "Use an image that ships the tools for this version. No files were changed.",
    },
    "staging_failed": {
        "what": "Creation of temporary directory '{path}' failed.",
        "next": "Check free space and permissions on the data volume. The original files were moved back.",
    },
    "staging_rollback_failed": {
        "what": "Creation of temporary directory '{path}' failed and the original files could not be moved back.",
        "next": (
            "The original files remain in `{old_dir}`. Move them back into {data_dir} by hand, "
            "remove the empty `old` directory and restart."
        ),
    },
    "collation_probe_failed": {
        "what": "Could not determine the collation of the old database in {path}.",
        "next": "Inspect the `old` directory and the probe output above before restarting.",
    },
    "initdb_failed": {
        "what": "Initialising the PostgreSQL {version} data directory failed.",
        "next": "Inspect the `old` and `new` directories; the original files are in `old`.",
    },
    "conversion_failed": {
        "what": "pg_upgrade from PostgreSQL {old_version} to {new_version} failed.",
        "next": (
            "Read the pg_upgrade logs in the data directory and inspect the `old` and `new` "
            "directories manually. Nothing was rolled back."
        ),
    },
    "promotion_failed": {
        "what": "Moving the upgraded files into {path} failed.",
        "next": "Finish the move by hand from the `new` directory; `old` still holds the original files.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
