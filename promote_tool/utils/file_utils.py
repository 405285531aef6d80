# promote_tool/utils/file_utils.py
"""File operation utilities"""

import errno
import filecmp
from pathlib import Path

from ..api.exceptions import FilesystemErrorKind


def classify_os_error(error: OSError) -> FilesystemErrorKind:
    """
    Map an OS error onto a filesystem error kind

    Args:
        error: Raised OS error

    Returns:
        FilesystemErrorKind
    """
    if isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
        return FilesystemErrorKind.PERMISSION
    if error.errno == errno.ENOSPC:
        return FilesystemErrorKind.NO_SPACE
    if isinstance(error, FileNotFoundError) or error.errno == errno.ENOENT:
        return FilesystemErrorKind.NOT_FOUND
    return FilesystemErrorKind.OTHER


def files_equal(first: Path, second: Path) -> bool:
    """
    Compare two regular files by size and content

    Args:
        first: First file
        second: Second file

    Returns:
        True if both exist and have identical content
    """
    if not first.is_file() or not second.is_file():
        return False
    if first.stat().st_size != second.stat().st_size:
        return False
    return filecmp.cmp(first, second, shallow=False)


def visible_entries(root: Path) -> list:
    """
    Top-level entries that are not hidden

    Args:
        root: Directory to list

    Returns:
        Sorted entry names
    """
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if not p.name.startswith("."))
