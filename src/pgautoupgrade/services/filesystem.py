"""Filesystem operations for the staging and promotion phases.

Every operation returns an ``OperationResult`` instead of raising, so the
orchestrator decides per call whether a failure is fatal.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from rich.console import Console


@dataclass
class OperationResult:
    operation: str
    path: str
    error: Optional[str] = None
    moved: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def make_dir(self, path: str) -> OperationResult:
        try:
            os.mkdir(path)
        except OSError as exc:
            return OperationResult("mkdir", path, error=str(exc))
        if not os.path.isdir(path):
            return OperationResult("mkdir", path, error="directory missing after creation")
        self.logger.debug("Created directory: %s", path)
        return OperationResult("mkdir", path)

    def set_permissions(self, path: str, mode: int) -> OperationResult:
        try:
            os.chmod(path, mode)
        except OSError as exc:
            self.logger.warning("Could not set permissions on %s: %s", path, exc)
            return OperationResult("chmod", path, error=str(exc))
        return OperationResult("chmod", path)

    def move_contents(
        self,
        source: str,
        destination: str,
        exclude: Iterable[str] = (),
    ) -> OperationResult:
        """Move every entry of ``source`` into ``destination``.

        Stops at the first failure. ``moved`` lists the entry names that made
        it across, so a caller can move them back.
        """
        skipped = set(exclude)
        result = OperationResult("move", destination)
        try:
            names = sorted(os.listdir(source))
        except OSError as exc:
            result.error = str(exc)
            return result

        for name in names:
            if name in skipped:
                continue
            src_path = os.path.join(source, name)
            dst_path = os.path.join(destination, name)
            if os.path.lexists(dst_path):
                result.error = f"{dst_path} already exists"
                return result
            try:
                shutil.move(src_path, dst_path)
            except (OSError, shutil.Error) as exc:
                result.error = f"{name}: {exc}"
                return result
            self.logger.debug("Moved %s -> %s", src_path, dst_path)
            result.moved.append(name)
        return result

    def move_back(self, source: str, destination: str, names: Iterable[str]) -> OperationResult:
        """Return previously moved entries from ``source`` to ``destination``."""
        result = OperationResult("move", destination)
        for name in names:
            try:
                shutil.move(os.path.join(source, name), os.path.join(destination, name))
            except (OSError, shutil.Error) as exc:
                result.error = f"{name}: {exc}"
                return result
            result.moved.append(name)
        return result

    def copy_files(self, source_dir: str, destination_dir: str, names: Iterable[str]) -> OperationResult:
        result = OperationResult("copy", destination_dir)
        for name in names:
            try:
                shutil.copy2(os.path.join(source_dir, name), os.path.join(destination_dir, name))
            except OSError as exc:
                result.error = f"{name}: {exc}"
                return result
            self.logger.debug("Copied %s from %s", name, source_dir)
            result.moved.append(name)
        return result

    def remove_dir(self, path: str) -> OperationResult:
        if not os.path.lexists(path):
            return OperationResult("rmtree", path)
        try:
            shutil.rmtree(path)
        except OSError as exc:
            return OperationResult("rmtree", path, error=str(exc))
        self.logger.debug("Removed directory: %s", path)
        return OperationResult("rmtree", path)

    def remove_file(self, path: str) -> OperationResult:
        try:
            os.remove(path)
        except FileNotFoundError:
            return OperationResult("remove", path)
        except OSError as exc:
            return OperationResult("remove", path, error=str(exc))
        self.logger.debug("Removed file: %s", path)
        return OperationResult("remove", path)
