"""
pgautoupgrade - in-place PostgreSQL major version upgrades at container start
"""

__version__ = "0.1.0"

from .core import PostgresAutoUpgrader, UpgraderError

__all__ = ["PostgresAutoUpgrader", "UpgraderError"]
