"""Reads the format-version marker of a data directory."""

import os
from typing import Optional

from pgautoupgrade.constants import MARKER_FILE
from pgautoupgrade.errors import UpgraderError


class VersionMarkerService:
    """The marker file is the only source of truth for the on-disk version."""

    def __init__(self, logger):
        self.logger = logger

    def marker_path(self, data_dir: str) -> str:
        return os.path.join(data_dir, MARKER_FILE)

    def read(self, data_dir: str) -> Optional[str]:
        """Return the major version recorded in ``data_dir``, or None when there is none.

        A missing or empty marker means a fresh directory.
        """
        path = self.marker_path(data_dir)
        try:
            with open(path, "r", encoding="utf-8") as file_obj:
                content = file_obj.read().strip()
        except FileNotFoundError:
            self.logger.debug("No %s found in %s", MARKER_FILE, data_dir)
            return None
        except OSError as exc:
            raise UpgraderError(f"Could not read version marker '{path}': {exc}") from exc

        return content or None
