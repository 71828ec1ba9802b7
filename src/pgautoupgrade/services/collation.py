"""Reads the collation of the old cluster through the legacy single-user backend."""

from typing import Optional

from pgautoupgrade.errors import CollationProbeError
from pgautoupgrade.errors_catalog import actionable_error

COLLATE_QUERY = "SHOW LC_COLLATE"
COLLATE_MARKER = 'lc_collate = "'


def parse_collation(output: str) -> Optional[str]:
    """Extract the collation from ``postgres --single`` console output.

    The backend prints the result row as::

        1: lc_collate = "en_US.utf8"	(typeid = 25, len = -1, typmod = -1, byval = f)

    Returns None when no such line is present or the value is empty.
    """
    for line in output.splitlines():
        if COLLATE_MARKER not in line:
            continue
        value = line.split('"')[1]
        return value or None
    return None


class CollationProbeService:
    def __init__(self, logger, console, run_cmd):
        self.logger = logger
        self.console = console
        self.run_cmd = run_cmd

    def build_command(self, old_dir: str, probe_binary: str):
        return [probe_binary, "--single", "-D", old_dir]

    def probe(self, old_dir: str, probe_binary: str) -> str:
        try:
            result = self.run_cmd(
                self.build_command(old_dir, probe_binary),
                capture_output=True,
                input_text=f"{COLLATE_QUERY}\n",
                error_cls=CollationProbeError,
            )
        except CollationProbeError as exc:
            raise CollationProbeError(
                f"{actionable_error('collation_probe_failed', path=old_dir)}\n{exc}"
            ) from exc

        collation = parse_collation(result.stdout or "")
        if not collation:
            self.logger.debug("Probe output without collation line: %r", result.stdout)
            raise CollationProbeError(actionable_error("collation_probe_failed", path=old_dir))

        self.console.print(
            f"[green]Old database using collation: '{collation}'. "
            "Initialising new database with that collation[/green]"
        )
        return collation
