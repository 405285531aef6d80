# promote_tool/hosting/base.py
"""Remote hosting API abstract base class"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class MergeRequestInfo:
    """Identifying metadata of a merge request"""
    url: str
    number: int
    title: str
    branch: str
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "url": self.url,
            "number": self.number,
            "title": self.title,
            "branch": self.branch,
            "created_at": self.created_at,
        }


class RemoteHost(ABC):
    """Token-authenticated operations on the hosted repository"""

    @abstractmethod
    async def validate_credentials(self) -> str:
        """
        Check the access token

        Returns:
            Login name of the token owner

        Raises:
            AuthenticationFailedError: If the token is rejected
        """
        pass

    @abstractmethod
    async def create_merge_request(self, head: str, base: str, title: str,
                                   body: str = "") -> MergeRequestInfo:
        """
        Open a merge request from ``head`` into ``base``

        Raises:
            ValidationConflictError: If the request is rejected, e.g. a duplicate
        """
        pass

    @abstractmethod
    async def merge(self, number: int, message: str = "") -> str:
        """
        Merge a merge request

        Returns:
            Identifier of the resulting commit
        """
        pass

    @abstractmethod
    async def list_open_merge_requests(self, head: str, base: str) -> List[MergeRequestInfo]:
        """Open merge requests between two branches"""
        pass

    @abstractmethod
    async def close_merge_request(self, number: int) -> None:
        """Close a merge request without merging"""
        pass

    @property
    @abstractmethod
    def repository_url(self) -> str:
        """Browser URL of the repository"""
        pass

    @abstractmethod
    def history_url(self, branch: str) -> str:
        """Browser URL of a branch's commit history"""
        pass

    @abstractmethod
    def compare_url(self, base: str, head: str) -> str:
        """Browser URL comparing two branches"""
        pass

    async def close(self) -> None:
        """Release network resources"""
        pass

    async def __aenter__(self) -> 'RemoteHost':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
