"""Core functionality for promote-tool"""

from .diff_classifier import DiffClassifier
from .folder_tree import FolderTreeBuilder
from .directory_sync import DirectorySynchronizer
from .report_generator import ReportGenerator, ReportMetadata
from .requirement_validator import RequirementValidator, ValidationContext
from .git_runner import GitRunner, GitOutput
from .git_client import GitClient
from .discovery import GitDiscovery

__all__ = [
    "DiffClassifier",
    "FolderTreeBuilder",
    "DirectorySynchronizer",
    "ReportGenerator",
    "ReportMetadata",
    "RequirementValidator",
    "ValidationContext",
    "GitRunner",
    "GitOutput",
    "GitClient",
    "GitDiscovery",
]
