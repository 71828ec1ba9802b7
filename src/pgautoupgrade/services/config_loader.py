"""Configuration loader for pgautoupgrade."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from pgautoupgrade.errors import UpgraderError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "data_dir",
        "target_version",
        "postgres_user",
        "target_bin_dir",
        "link_mode",
        "verbose",
        "log_file",
        "dry_run",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise UpgraderError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise UpgraderError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise UpgraderError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise UpgraderError(f"Unknown configuration keys: {unknown_list}")

        return parsed


def read_file_env(var: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return ``var`` from the environment, or the contents of ``${var}_FILE``.

    Setting both is an error, matching the Docker secrets convention of the
    official images.
    """
    env = os.environ if environ is None else environ
    file_var = f"{var}_FILE"
    value = env.get(var)
    file_path = env.get(file_var)

    if value and file_path:
        raise UpgraderError(f"Both {var} and {file_var} are set (but are exclusive).")
    if value:
        return value
    if file_path:
        try:
            return Path(file_path).read_text(encoding="utf-8").rstrip("\n")
        except OSError as exc:
            raise UpgraderError(f"Could not read {file_var} '{file_path}': {exc}") from exc
    return None
