"""Static table of legacy PostgreSQL toolchains bundled in the image."""

from typing import Dict, Iterator, Optional, Tuple

from packaging import version

from pgautoupgrade.constants import LEGACY_BIN_DIR_TEMPLATE
from pgautoupgrade.models import ToolchainEntry


def _entry(ver: str) -> ToolchainEntry:
    return ToolchainEntry(version=ver, bin_dir=LEGACY_BIN_DIR_TEMPLATE.format(version=ver))


DEFAULT_ENTRIES: Tuple[ToolchainEntry, ...] = (
    _entry("9.5"),
    _entry("9.6"),
    _entry("10"),
    _entry("11"),
    _entry("12"),
    _entry("13"),
    _entry("14"),
)


class ToolchainTable:
    """Maps an on-disk major version to the binaries that can read it."""

    def __init__(self, entries: Tuple[ToolchainEntry, ...] = DEFAULT_ENTRIES):
        self._entries: Dict[str, ToolchainEntry] = {entry.version: entry for entry in entries}

    def __iter__(self) -> Iterator[ToolchainEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def versions(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def lookup(self, ver: str) -> Optional[ToolchainEntry]:
        return self._entries.get(ver)

    @staticmethod
    def allows_upgrade(entry: ToolchainEntry, target_version: str) -> bool:
        # Never downgrade, and never touch a directory already at the target.
        return version.parse(target_version) > version.parse(entry.version)
