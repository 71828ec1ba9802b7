"""Refuses to start when an interrupted upgrade left staging directories behind."""

import os

from pgautoupgrade.constants import NEW_STAGING_NAME, OLD_STAGING_NAME
from pgautoupgrade.errors import PreflightConflictError
from pgautoupgrade.errors_catalog import actionable_error


class PreflightService:
    """Checks that neither ``old`` nor ``new`` exists before anything destructive runs.

    Leftovers are never reused or deleted: they may hold the only copy of a
    half-converted database, so an operator has to look at them.
    """

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def check(self, context):
        self.console.print("[blue]Checking for left over artifacts from a failed previous autoupgrade...[/blue]")

        checks = (
            (OLD_STAGING_NAME, context.old_dir, PreflightConflictError.OLD_PRESENT),
            (NEW_STAGING_NAME, context.new_dir, PreflightConflictError.NEW_PRESENT),
        )
        for name, path, exit_code in checks:
            if os.path.lexists(path):
                raise PreflightConflictError(
                    actionable_error("leftover_staging", name=name.upper(), path=path),
                    exit_code=exit_code,
                )

        self.logger.info("No artifacts found from a failed previous autoupgrade.")
