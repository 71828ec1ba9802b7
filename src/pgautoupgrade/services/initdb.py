"""Initialises the empty target-version cluster in the ``new`` staging directory."""

from pgautoupgrade.errors import InitializationError
from pgautoupgrade.errors_catalog import actionable_error


class InitdbService:
    def __init__(self, logger, console, run_cmd):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def build_command(self, context, collation: str):
        return [
            context.target_binary("initdb"),
            f"--username={context.postgres_user}",
            f"--locale={collation}",
            context.new_dir,
        ]

    def initialize(self, context, collation: str):
        self.console.print(
            f"[blue]Initialising PostgreSQL {context.target_version} data directory[/blue]"
        )
        try:
            self.run_cmd(self.build_command(context, collation), error_cls=InitializationError)
        except InitializationError as exc:
            raise InitializationError(
                f"{actionable_error('initdb_failed', version=context.target_version)}\n{exc}"
            ) from exc
