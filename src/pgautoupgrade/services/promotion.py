"""Promotes the converted cluster to the live data directory."""

import os

from pgautoupgrade.constants import AUTH_CONFIG_FILES, UPGRADE_HELPER_SCRIPTS
from pgautoupgrade.errors import PromotionError
from pgautoupgrade.errors_catalog import actionable_error


class PromotionService:
    def __init__(self, logger, console, filesystem_service, home_dir=None):
        self.logger = logger
        self.console = console
        self.filesystem = filesystem_service
        self.home_dir = home_dir or os.path.expanduser("~")

    def promote(self, context):
        self.console.print("[blue]Moving the new updated database files to the active directory[/blue]")
        moved = self.filesystem.move_contents(context.new_dir, context.data_dir)
        self._require(moved, context)

        self.console.print("[blue]Copying the old pg_hba and pg_ident configuration files across[/blue]")
        copied = self.filesystem.copy_files(context.old_dir, context.data_dir, AUTH_CONFIG_FILES)
        self._require(copied, context)

        self.console.print("[blue]Removing left over database files[/blue]")
        for path in (context.old_dir, context.new_dir):
            self._require(self.filesystem.remove_dir(path), context)

        for script_dir in (context.data_dir, self.home_dir):
            for name in UPGRADE_HELPER_SCRIPTS:
                removed = self.filesystem.remove_file(os.path.join(script_dir, name))
                if not removed.ok:
                    self.logger.warning("Could not remove %s: %s", removed.path, removed.error)

    def _require(self, result, context):
        if result.ok:
            return
        self.logger.error("%s failed for %s: %s", result.operation, result.path, result.error)
        raise PromotionError(
            f"{actionable_error('promotion_failed', path=context.data_dir)}\n"
            f"{result.operation} {result.path}: {result.error}"
        )
