"""Utility functions for promote-tool"""

from .async_utils import run_async
from .file_utils import classify_os_error, files_equal, visible_entries

__all__ = [
    "run_async",
    "classify_os_error",
    "files_equal",
    "visible_entries",
]
