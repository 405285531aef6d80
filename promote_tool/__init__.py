"""Promote Tool - promote a working directory tree to a production tree.

Changes travel through a remote git repository: the working branch is
published, its difference to the production branch is classified, the
production branch is updated, and a markdown change report is written.
"""

from .__version__ import __version__, __version_info__

# Core API
from .api.promoter import Promoter, promote

# Data models
from .models.change import ChangeSet, FileChange, FileStatus
from .models.config import PromoteConfig
from .models.result import PromotionOutcome, PromotionPhase, ConfirmationDecision

# Exceptions
from .api.exceptions import (
    ErrorKind,
    PromoteToolError,
    ConfigError,
    ToolMissingError,
    GitCommandError,
    RemoteRejectedError,
    IdentityMissingError,
    PathNotFoundError,
    SyncError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",

    # Main classes
    "Promoter",
    "promote",

    # Data models
    "ChangeSet",
    "FileChange",
    "FileStatus",
    "PromoteConfig",
    "PromotionOutcome",
    "PromotionPhase",
    "ConfirmationDecision",

    # Exceptions
    "ErrorKind",
    "PromoteToolError",
    "ConfigError",
    "ToolMissingError",
    "GitCommandError",
    "RemoteRejectedError",
    "IdentityMissingError",
    "PathNotFoundError",
    "SyncError",
]
