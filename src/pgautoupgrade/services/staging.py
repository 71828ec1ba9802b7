"""Moves the live data into the ``old`` staging directory and creates ``new``."""

from pgautoupgrade.constants import STAGING_DIR_MODE, STAGING_NAMES
from pgautoupgrade.errors import StagingCreationError
from pgautoupgrade.errors_catalog import actionable_error


class StagingService:
    """Prepares the staging pair, restoring the live directory if that fails."""

    def __init__(self, logger, console, filesystem_service):
        self.logger = logger
        self.console = console
        self.filesystem = filesystem_service

    def stage(self, context):
        self.stage_old(context)
        self.create_new(context)
        self.filesystem.set_permissions(context.old_dir, STAGING_DIR_MODE)
        self.filesystem.set_permissions(context.new_dir, STAGING_DIR_MODE)

    def stage_old(self, context):
        self.console.print(f"[blue]Creating OLD temporary directory {context.old_dir}[/blue]")
        created = self.filesystem.make_dir(context.old_dir)
        if not created.ok:
            self.logger.error("Could not create %s: %s", context.old_dir, created.error)
            raise StagingCreationError(
                actionable_error("staging_failed", path=context.old_dir),
                exit_code=StagingCreationError.OLD_FAILED,
            )

        self.console.print("[blue]Moving existing data files into OLD temporary directory[/blue]")
        moved = self.filesystem.move_contents(
            context.data_dir,
            context.old_dir,
            exclude=STAGING_NAMES,
        )
        if not moved.ok:
            self.logger.error("Moving data files into %s failed: %s", context.old_dir, moved.error)
            restored = self.rollback(context, moved.moved)
            self._fail(context, context.old_dir, StagingCreationError.OLD_FAILED, restored)
        self.logger.info("Moved %d entries into %s", len(moved.moved), context.old_dir)

    def create_new(self, context):
        self.console.print(f"[blue]Creating NEW temporary directory {context.new_dir}[/blue]")
        created = self.filesystem.make_dir(context.new_dir)
        if created.ok:
            return

        self.logger.error("Could not create %s: %s", context.new_dir, created.error)
        # The old data is still intact at this point, so it can go back.
        restored = self.rollback(context)
        self._fail(context, context.new_dir, StagingCreationError.NEW_FAILED, restored)

    def _fail(self, context, path, exit_code, restored):
        if restored.ok:
            message = actionable_error("staging_failed", path=path)
        else:
            message = actionable_error(
                "staging_rollback_failed",
                path=path,
                old_dir=context.old_dir,
                data_dir=context.data_dir,
            )
        raise StagingCreationError(message, exit_code=exit_code)

    def rollback(self, context, names=None):
        """Move staged entries back into the live directory and drop the empty ``old``.

        When ``names`` is None everything in ``old`` goes back. If any entry
        cannot be moved, ``old`` is kept so the next start refuses to run.
        """
        self.console.print("[yellow]Moving the original data files back into place[/yellow]")
        if names is None:
            restored = self.filesystem.move_contents(context.old_dir, context.data_dir)
        else:
            restored = self.filesystem.move_back(context.old_dir, context.data_dir, names)

        if not restored.ok:
            self.logger.error(
                "Restoring %s failed: %s. The remaining files are still in %s.",
                context.data_dir,
                restored.error,
                context.old_dir,
            )
            return restored

        removed = self.filesystem.remove_dir(context.old_dir)
        if not removed.ok:
            self.logger.warning("Could not remove %s: %s", context.old_dir, removed.error)
        self.logger.info("Restored %d entries into %s", len(restored.moved), context.data_dir)
        return restored
