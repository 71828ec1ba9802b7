"""Shared domain models for pgautoupgrade."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import NEW_STAGING_NAME, OLD_STAGING_NAME


@dataclass(frozen=True)
class UpgradeContext:
    """Settings resolved once at start-up and threaded through every stage."""

    data_dir: str
    target_version: str
    postgres_user: str
    target_bin_dir: str
    link_mode: bool = True

    @property
    def old_dir(self) -> str:
        return os.path.join(self.data_dir, OLD_STAGING_NAME)

    @property
    def new_dir(self) -> str:
        return os.path.join(self.data_dir, NEW_STAGING_NAME)

    def target_binary(self, name: str) -> str:
        return os.path.join(self.target_bin_dir, name)


@dataclass(frozen=True)
class ToolchainEntry:
    """Legacy binaries able to read one on-disk major version."""

    version: str
    bin_dir: str

    @property
    def probe_binary(self) -> str:
        return os.path.join(self.bin_dir, "postgres")


class UpgradeState(str, Enum):
    DETECTING = "detecting"
    NO_UPGRADE = "no_upgrade"
    PREFLIGHTING = "preflighting"
    STAGING = "staging"
    PROBING = "probing"
    INITIALIZING = "initializing"
    CONVERTING = "converting"
    PROMOTING = "promoting"
    DONE = "done"
    ABORTED = "aborted"


class OutcomeStatus(str, Enum):
    NO_UPGRADE_NEEDED = "no_upgrade_needed"
    UPGRADE_SUCCEEDED = "upgrade_succeeded"
    UPGRADE_ABORTED = "upgrade_aborted"


@dataclass(frozen=True)
class UpgradeOutcome:
    status: OutcomeStatus
    exit_code: int = 0
    reason: Optional[str] = None

    @classmethod
    def no_upgrade(cls, reason: Optional[str] = None) -> "UpgradeOutcome":
        return cls(OutcomeStatus.NO_UPGRADE_NEEDED, 0, reason)

    @classmethod
    def succeeded(cls) -> "UpgradeOutcome":
        return cls(OutcomeStatus.UPGRADE_SUCCEEDED, 0)

    @classmethod
    def aborted(cls, reason: str, exit_code: int) -> "UpgradeOutcome":
        return cls(OutcomeStatus.UPGRADE_ABORTED, exit_code, reason)


@dataclass(frozen=True)
class UpgradePlan:
    """What a run would do, computed without touching the data directory."""

    detected_version: Optional[str]
    target_version: str
    entry: Optional[ToolchainEntry]

    @property
    def upgrade_required(self) -> bool:
        return self.entry is not None
