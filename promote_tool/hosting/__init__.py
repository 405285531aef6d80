"""Remote hosting API clients"""

from .base import RemoteHost, MergeRequestInfo
from .github import GitHubHost

__all__ = [
    "RemoteHost",
    "MergeRequestInfo",
    "GitHubHost",
]
