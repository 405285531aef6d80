# promote_tool/core/directory_sync.py
"""Mirror one directory tree onto another"""

import logging
import shutil
from pathlib import Path
from typing import Iterable, Union

from ..api.exceptions import FilesystemErrorKind, SyncError
from ..constants import DEFAULT_APP_CONFIG_DIR, DEFAULT_REPORT_DIR, GIT_METADATA_DIR
from ..models.result import SyncResult
from ..utils.file_utils import classify_os_error, files_equal

logger = logging.getLogger(__name__)


class DirectorySynchronizer:
    """Make a target tree match a source tree, except for protected names

    Protected names are matched at every level. They are skipped while
    walking the source and never pruned from the target, so they stay purely
    target-local.
    """

    def __init__(self, protected_names: Iterable[str] = None):
        if protected_names is None:
            protected_names = (GIT_METADATA_DIR, DEFAULT_APP_CONFIG_DIR, DEFAULT_REPORT_DIR)
        self.protected_names = frozenset(protected_names)

    def sync(self, source: Union[str, Path], target: Union[str, Path]) -> SyncResult:
        """
        Synchronize target with source

        Args:
            source: Source root
            target: Target root

        Returns:
            SyncResult listing copied files, deleted entries and created directories

        Raises:
            SyncError: On any filesystem failure, classified by kind
        """
        source = Path(source)
        target = Path(target)
        result = SyncResult()

        if not source.is_dir():
            raise SyncError(
                f"Source directory does not exist: {source}",
                FilesystemErrorKind.NOT_FOUND,
                str(source),
                "sync"
            )

        if target.exists() and source.resolve() == target.resolve():
            logger.debug("Source and target are the same directory, nothing to sync")
            return result

        logger.info(f"Synchronizing {source} -> {target}")

        if not target.exists():
            self._guard("create directory", target, target.mkdir, parents=True)
            result.created_dirs.append(str(target))

        self._copy_pass(source, target, result)
        self._prune_pass(source, target, result)

        logger.info(
            f"Sync complete: {len(result.copied)} copied, "
            f"{len(result.deleted)} deleted, {len(result.created_dirs)} directories created"
        )
        return result

    def _copy_pass(self, source: Path, target: Path, result: SyncResult) -> None:
        for entry in self._list(source):
            if entry.name in self.protected_names:
                continue

            destination = target / entry.name

            if entry.is_dir():
                if destination.exists() and not destination.is_dir():
                    self._remove(destination, result)
                if not destination.exists():
                    self._guard("create directory", destination, destination.mkdir, parents=True)
                    result.created_dirs.append(str(destination))
                self._copy_pass(entry, destination, result)
                continue

            if destination.is_dir() and not destination.is_symlink():
                self._remove(destination, result)

            if self._guard("compare file", destination, files_equal, entry, destination):
                continue

            logger.debug(f"Copying {entry} -> {destination}")
            self._guard("copy file", destination, shutil.copy2, entry, destination)
            result.copied.append(str(destination))

    def _prune_pass(self, source: Path, target: Path, result: SyncResult) -> None:
        for entry in self._list(target):
            if entry.name in self.protected_names:
                continue

            counterpart = source / entry.name

            if not counterpart.exists():
                self._remove(entry, result)
            elif entry.is_dir() and not entry.is_symlink() and counterpart.is_dir():
                self._prune_pass(counterpart, entry, result)

    def _remove(self, path: Path, result: SyncResult) -> None:
        logger.debug(f"Removing {path}")
        if path.is_dir() and not path.is_symlink():
            self._guard("delete directory", path, shutil.rmtree, path)
        else:
            self._guard("delete file", path, path.unlink)
        result.deleted.append(str(path))

    def _list(self, directory: Path) -> list:
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise self._error("list directory", directory, e) from e

    def _guard(self, operation: str, path: Path, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OSError as e:
            raise self._error(operation, path, e) from e

    @staticmethod
    def _error(operation: str, path: Path, error: OSError) -> SyncError:
        kind = classify_os_error(error)
        return SyncError(
            f"Failed to {operation} {path}: {error.strerror or error}",
            kind,
            str(path),
            operation
        )
