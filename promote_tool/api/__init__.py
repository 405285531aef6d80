"""Public API for promote-tool"""

from .exceptions import (
    ErrorKind,
    FilesystemErrorKind,
    PromoteToolError,
    ConfigError,
    ToolMissingError,
    GitCommandError,
    IdentityMissingError,
    PathNotFoundError,
    RequirementsNotMetError,
    RemoteHostError,
    FilesystemError,
    SyncError,
    ReportStorageError,
    ReportExistsError,
)
from .promoter import Promoter, promote

__all__ = [
    "Promoter",
    "promote",
    "ErrorKind",
    "FilesystemErrorKind",
    "PromoteToolError",
    "ConfigError",
    "ToolMissingError",
    "GitCommandError",
    "IdentityMissingError",
    "PathNotFoundError",
    "RequirementsNotMetError",
    "RemoteHostError",
    "FilesystemError",
    "SyncError",
    "ReportStorageError",
    "ReportExistsError",
]
