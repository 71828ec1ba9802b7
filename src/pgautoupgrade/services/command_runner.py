"""Subprocess execution service for pgautoupgrade."""

import subprocess
from typing import List, Optional

from pgautoupgrade.errors import UpgraderError


class CommandRunner:
    """Runs external PostgreSQL tools as blocking calls with consistent error handling."""

    def __init__(self, logger):
        self.logger = logger

    def run(
        self,
        cmd: List[str],
        capture_output: bool = False,
        input_text: Optional[str] = None,
        cwd: Optional[str] = None,
        error_cls=UpgraderError,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        try:
            result = subprocess.run(
                cmd,
                text=True,
                capture_output=capture_output,
                input=input_text,
                cwd=cwd,
            )
        except FileNotFoundError as exc:
            raise error_cls(f"Required command not found: {cmd[0]}.") from exc
        except OSError as exc:
            raise error_cls(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        raise error_cls(message)
