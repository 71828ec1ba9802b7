"""Domain errors for pgautoupgrade.

Every error carries the process exit code the container terminates with.
Supervisors branch on these codes, so they never change:

    1   generic failure (configuration, probe, initdb, pg_upgrade, promotion)
    7   the ``old`` staging directory could not be prepared
    8   the ``new`` staging directory could not be created
    9   the on-disk version is not known to the toolchain table
    10  a left over ``old`` directory was found
    11  a left over ``new`` directory was found
"""

from typing import Optional


class UpgraderError(RuntimeError):
    """Raised when the upgrade cannot continue safely."""

    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class PreflightConflictError(UpgraderError):
    """Staging directories left behind by an interrupted run."""

    OLD_PRESENT = 10
    NEW_PRESENT = 11


class UnrecognizedFormatError(UpgraderError):
    exit_code = 9


class StagingCreationError(UpgraderError):
    """A staging directory could not be prepared.

    The live data is moved back when possible; the message says whether it was.
    """

    OLD_FAILED = 7
    NEW_FAILED = 8
    exit_code = NEW_FAILED


class CollationProbeError(UpgraderError):
    pass


class InitializationError(UpgraderError):
    pass


class ConversionError(UpgraderError):
    """pg_upgrade failed. Nothing is rolled back past this point."""


class PromotionError(UpgraderError):
    pass
