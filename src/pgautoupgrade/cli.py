import logging
import os

import click
from packaging import version as packaging_version
from rich.logging import RichHandler

from .constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_DATA_DIR,
    DEFAULT_POSTGRES_USER,
    DEFAULT_TARGET_BIN_DIR,
)
from .core import PostgresAutoUpgrader, UpgraderError
from .models import OutcomeStatus, UpgradeContext
from .services.config_loader import ConfigLoader, read_file_env

# `postgres` flags that print something and exit without touching the data directory.
EXIT_EARLY_FLAGS = {"-?", "--help", "--describe-config", "-V", "--version"}


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def normalize_command(args):
    """Prepend ``postgres`` when the first argument looks like a server flag."""
    command = list(args)
    if command and command[0].startswith("-"):
        command.insert(0, "postgres")
    return command


def wants_upgrade(command) -> bool:
    if not command or command[0] != "postgres":
        return False
    return not any(arg in EXIT_EARLY_FLAGS for arg in command[1:])


def exec_command(command):
    os.execvp(command[0], command)


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        # --help belongs to the server command.
        "help_option_names": ["--pgauto-help"],
    }
)
@click.option(
    "--data-dir",
    envvar="PGDATA",
    required=False,
    help=f"PostgreSQL data directory (default: {DEFAULT_DATA_DIR}).",
)
@click.option(
    "--target-version",
    envvar="PGTARGET",
    required=False,
    help="Major version of the PostgreSQL server shipped in this image.",
)
@click.option(
    "--postgres-user",
    required=False,
    help="Superuser for initdb and pg_upgrade. Falls back to POSTGRES_USER / POSTGRES_USER_FILE.",
)
@click.option(
    "--target-bin-dir",
    envvar="PGAUTO_TARGET_BIN_DIR",
    required=False,
    help=f"Directory holding the target initdb and pg_upgrade (default: {DEFAULT_TARGET_BIN_DIR}).",
)
@click.option(
    "--link/--copy",
    "link_mode",
    default=None,
    help="Use pg_upgrade hard-link mode (default) or copy the data files.",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Detect the version and run the preflight check without changing anything.",
)
@click.option(
    "--no-exec",
    is_flag=True,
    default=False,
    help="Exit after the upgrade instead of starting the server command.",
)
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def main(
    data_dir,
    target_version,
    postgres_user,
    target_bin_dir,
    link_mode,
    config,
    verbose,
    log_file,
    dry_run,
    no_exec,
    command,
):
    """Upgrade an old PostgreSQL data directory, then start COMMAND."""
    logger = logging.getLogger("pgautoupgrade")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
        env_user = read_file_env("POSTGRES_USER")
    except UpgraderError as exc:
        raise click.ClickException(str(exc)) from exc

    data_dir = _resolve_option(data_dir, config_values, "data_dir", default=DEFAULT_DATA_DIR)
    target_version = _resolve_option(target_version, config_values, "target_version")
    postgres_user = _resolve_option(
        postgres_user or env_user,
        config_values,
        "postgres_user",
        default=DEFAULT_POSTGRES_USER,
    )
    target_bin_dir = _resolve_option(
        target_bin_dir,
        config_values,
        "target_bin_dir",
        default=DEFAULT_TARGET_BIN_DIR,
    )
    link_mode = bool(_resolve_option(link_mode, config_values, "link_mode", default=True))
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    server_command = normalize_command(command)

    if not server_command or wants_upgrade(server_command):
        if not target_version:
            raise click.ClickException(
                "Missing target version: set PGTARGET, '--target-version' or 'target_version' in config."
            )
        target_version = str(target_version)
        try:
            packaging_version.Version(target_version)
        except packaging_version.InvalidVersion as exc:
            raise click.ClickException(f"Invalid target version: {target_version}") from exc

        context = UpgradeContext(
            data_dir=str(data_dir),
            target_version=target_version,
            postgres_user=str(postgres_user),
            target_bin_dir=str(target_bin_dir),
            link_mode=link_mode,
        )
        outcome = PostgresAutoUpgrader(context=context, dry_run=dry_run).run()
        if outcome.status == OutcomeStatus.UPGRADE_ABORTED:
            raise SystemExit(outcome.exit_code)

    if server_command and not no_exec and not dry_run:
        logger.debug("Starting: %s", " ".join(server_command))
        exec_command(server_command)


if __name__ == "__main__":
    main()
