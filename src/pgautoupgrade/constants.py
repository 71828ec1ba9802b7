"""Shared on-disk names and defaults."""

MARKER_FILE = "PG_VERSION"
OLD_STAGING_NAME = "old"
NEW_STAGING_NAME = "new"
STAGING_NAMES = (OLD_STAGING_NAME, NEW_STAGING_NAME)
STAGING_DIR_MODE = 0o700

AUTH_CONFIG_FILES = ("pg_hba.conf", "pg_ident.conf")
UPGRADE_HELPER_SCRIPTS = ("delete_old_cluster.sh",)

DEFAULT_DATA_DIR = "/var/lib/postgresql/data"
DEFAULT_TARGET_BIN_DIR = "/usr/local/bin"
DEFAULT_POSTGRES_USER = "postgres"
LEGACY_BIN_DIR_TEMPLATE = "/usr/local-pg{version}/bin"
DEFAULT_CONFIG_FILE = ".pgautoupgrade.yml"
