"""Drives pg_upgrade between the two staging directories."""

from pgautoupgrade.errors import ConversionError
from pgautoupgrade.errors_catalog import actionable_error


class ConversionService:
    """Runs pg_upgrade as an opaque tool; only its exit status is interpreted."""

    def __init__(self, logger, console, run_cmd):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def build_command(self, context, entry):
        cmd = [
            context.target_binary("pg_upgrade"),
            f"--username={context.postgres_user}",
        ]
        if context.link_mode:
            cmd.append("--link")
        cmd.extend(
            [
                "-d",
                context.old_dir,
                "-D",
                context.new_dir,
                "-b",
                entry.bin_dir,
                "-B",
                context.target_bin_dir,
            ]
        )
        return cmd

    def convert(self, context, entry):
        self.console.print(f"[blue]Running pg_upgrade command, from {context.data_dir}[/blue]")
        # pg_upgrade writes its logs and helper scripts into the working directory.
        try:
            self.run_cmd(
                self.build_command(context, entry),
                cwd=context.data_dir,
                error_cls=ConversionError,
            )
        except ConversionError as exc:
            message = actionable_error(
                "conversion_failed",
                old_version=entry.version,
                new_version=context.target_version,
            )
            raise ConversionError(f"{message}\n{exc}") from exc
        self.console.print("[green]pg_upgrade command finished[/green]")
