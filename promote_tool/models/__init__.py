# promote_tool/models/__init__.py
"""Data models for promote-tool"""

from .change import FileStatus, FileChange, ChangeSet, STATUS_ORDER, split_path
from .folder import FolderFile, FolderNode
from .requirement import (
    RequirementStatus,
    RequirementCheck,
    RequirementResult,
    all_passed,
    failures,
    find_result,
)
from .config import PromoteConfig, RemoteConfig, GitSettings, BranchConfig, GitIdentity
from .result import (
    OperationStatus,
    PromotionPhase,
    ConfirmationDecision,
    ErrorDetail,
    Result,
    PromotionOutcome,
    SyncResult,
    SetupResult,
    MirrorResult,
)

__all__ = [
    # Change models
    "FileStatus",
    "FileChange",
    "ChangeSet",
    "STATUS_ORDER",
    "split_path",

    # Folder tree models
    "FolderFile",
    "FolderNode",

    # Requirement models
    "RequirementStatus",
    "RequirementCheck",
    "RequirementResult",
    "all_passed",
    "failures",
    "find_result",

    # Config models
    "PromoteConfig",
    "RemoteConfig",
    "GitSettings",
    "BranchConfig",
    "GitIdentity",

    # Result models
    "OperationStatus",
    "PromotionPhase",
    "ConfirmationDecision",
    "ErrorDetail",
    "Result",
    "PromotionOutcome",
    "SyncResult",
    "SetupResult",
    "MirrorResult",
]
