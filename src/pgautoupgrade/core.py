import logging
import subprocess
from typing import Callable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .errors import UnrecognizedFormatError, UpgraderError
from .errors_catalog import actionable_error
from .models import UpgradeContext, UpgradeOutcome, UpgradePlan, UpgradeState
from .services.collation import CollationProbeService
from .services.command_runner import CommandRunner
from .services.conversion import ConversionService
from .services.filesystem import FileSystemService
from .services.initdb import InitdbService
from .services.preflight import PreflightService
from .services.promotion import PromotionService
from .services.staging import StagingService
from .services.toolchain import ToolchainTable
from .services.version_marker import VersionMarkerService

console = Console()
logger = logging.getLogger("pgautoupgrade")


class PostgresAutoUpgrader:
    """Upgrades an old-format data directory in place before the server starts.

    Stages run strictly in order: detect, preflight, stage, probe, initdb,
    pg_upgrade, promote. Only a failure while creating the staging
    directories is rolled back; anything later leaves ``old`` and ``new`` in
    place so the next start stops at the preflight check.
    """

    def __init__(
        self,
        context: UpgradeContext,
        dry_run: bool = False,
        toolchain: Optional[ToolchainTable] = None,
        home_dir: Optional[str] = None,
    ):
        self.context = context
        self.dry_run = dry_run
        self.toolchain = toolchain or ToolchainTable()

        self.state = UpgradeState.DETECTING
        self.history: List[UpgradeState] = [UpgradeState.DETECTING]

        self.command_runner = CommandRunner(logger=logger)
        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.version_marker_service = VersionMarkerService(logger=logger)
        self.preflight_service = PreflightService(logger=logger, console=console)
        self.staging_service = StagingService(
            logger=logger,
            console=console,
            filesystem_service=self.filesystem_service,
        )
        self.collation_service = CollationProbeService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
        )
        self.initdb_service = InitdbService(logger=logger, console=console, run_cmd=self._run_cmd)
        self.conversion_service = ConversionService(
            logger=logger,
            console=console,
            run_cmd=self._run_cmd,
        )
        self.promotion_service = PromotionService(
            logger=logger,
            console=console,
            filesystem_service=self.filesystem_service,
            home_dir=home_dir,
        )

    def _run_cmd(
        self,
        cmd: List[str],
        capture_output: bool = False,
        input_text: Optional[str] = None,
        cwd: Optional[str] = None,
        error_cls=UpgraderError,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(
            cmd,
            capture_output=capture_output,
            input_text=input_text,
            cwd=cwd,
            error_cls=error_cls,
        )

    def _transition(self, state: UpgradeState):
        logger.debug("State: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _run_step(self, state: UpgradeState, callback: Callable, *args, **kwargs):
        self._transition(state)
        console.rule(f"[bold]{state.value.capitalize()}[/bold]")
        return callback(*args, **kwargs)

    def plan(self) -> UpgradePlan:
        """Decide whether an upgrade is needed, without touching the data directory."""
        target = self.context.target_version
        detected = self.version_marker_service.read(self.context.data_dir)

        if detected is None:
            logger.info("No version marker in %s; nothing to upgrade.", self.context.data_dir)
            return UpgradePlan(detected_version=None, target_version=target, entry=None)

        if detected == target:
            return UpgradePlan(detected_version=detected, target_version=target, entry=None)

        entry = self.toolchain.lookup(detected)
        if entry is None:
            raise UnrecognizedFormatError(actionable_error("unrecognized_version", version=detected))

        if not self.toolchain.allows_upgrade(entry, target):
            logger.info(
                "Database files are version %s and target is %s; no upgrade performed.",
                detected,
                target,
            )
            return UpgradePlan(detected_version=detected, target_version=target, entry=None)

        return UpgradePlan(detected_version=detected, target_version=target, entry=entry)

    def _announce(self, plan: UpgradePlan):
        console.print(
            Panel(
                f"Performing PG upgrade on version {plan.detected_version} database files. "
                f"Upgrading to version {plan.target_version}",
                style="bold blue",
            )
        )
        logger.info(
            "Upgrading %s from %s to %s using %s",
            self.context.data_dir,
            plan.detected_version,
            plan.target_version,
            plan.entry.bin_dir,
        )

    def _abort(self, exc: UpgraderError) -> UpgradeOutcome:
        self._transition(UpgradeState.ABORTED)
        console.print(
            Panel(
                Text(str(exc)),
                title=f"Automatic upgrade aborted (exit code {exc.exit_code})",
                border_style="bold red",
            )
        )
        logger.error(str(exc))
        return UpgradeOutcome.aborted(str(exc), exc.exit_code)

    def run(self) -> UpgradeOutcome:
        context = self.context
        try:
            plan = self.plan()
            if plan.detected_version is None:
                # An interrupted run may have moved the marker into `old`.
                self.preflight_service.check(context)
            if not plan.upgrade_required:
                self._transition(UpgradeState.NO_UPGRADE)
                return UpgradeOutcome.no_upgrade()

            self._announce(plan)
            entry = plan.entry
            self._run_step(UpgradeState.PREFLIGHTING, self.preflight_service.check, context)

            if self.dry_run:
                console.print(
                    f"[yellow]Dry run: would upgrade {context.data_dir} from {entry.version} "
                    f"to {context.target_version} using {entry.bin_dir}.[/yellow]"
                )
                self._transition(UpgradeState.NO_UPGRADE)
                return UpgradeOutcome.no_upgrade("dry run")

            self._run_step(UpgradeState.STAGING, self.staging_service.stage, context)
            collation = self._run_step(
                UpgradeState.PROBING,
                self.collation_service.probe,
                context.old_dir,
                entry.probe_binary,
            )
            self._run_step(UpgradeState.INITIALIZING, self.initdb_service.initialize, context, collation)
            self._run_step(UpgradeState.CONVERTING, self.conversion_service.convert, context, entry)
            self._run_step(UpgradeState.PROMOTING, self.promotion_service.promote, context)

            self._transition(UpgradeState.DONE)
            console.print(
                Panel("Automatic upgrade process finished with no errors (reported)", style="bold green")
            )
            return UpgradeOutcome.succeeded()

        except UpgraderError as exc:
            return self._abort(exc)
        except Exception as exc:
            logger.exception("Unexpected error")
            message = actionable_error("upgrade_failed")
            return self._abort(UpgraderError(f"{message}\nUnexpected error: {exc}"))
