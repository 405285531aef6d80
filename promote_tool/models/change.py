"""File change data models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class FileStatus(Enum):
    """Change status of a single file"""
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"


# Fixed ordering used wherever statuses are enumerated
STATUS_ORDER = (
    FileStatus.ADDED,
    FileStatus.MODIFIED,
    FileStatus.DELETED,
    FileStatus.MOVED,
)


@dataclass(frozen=True)
class FileChange:
    """A single classified file change

    ``old_path`` is always set for moved files. Files that were renamed and
    edited in the same change are reported as modified and keep their old path.
    """

    path: str
    status: FileStatus
    change_text: str = ""
    old_path: Optional[str] = None

    def __post_init__(self):
        if self.status == FileStatus.MOVED and not self.old_path:
            raise ValueError(f"Moved file requires old_path: {self.path}")

    @property
    def name(self) -> str:
        """File name without folders"""
        return split_path(self.path)[-1]

    @property
    def folder(self) -> Optional[str]:
        """Containing folder, or None for root-level files"""
        parts = split_path(self.path)
        if len(parts) < 2:
            return None
        return "/".join(parts[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "path": self.path,
            "status": self.status.value,
        }
        if self.old_path:
            data["old_path"] = self.old_path
        return data


@dataclass(frozen=True)
class ChangeSet:
    """Ordered list of file changes with derived statistics"""

    files: List[FileChange] = field(default_factory=list)

    def by_status(self, status: FileStatus) -> List[FileChange]:
        """Files with the given status, in classification order"""
        return [f for f in self.files if f.status == status]

    def paths(self, status: FileStatus) -> List[str]:
        """Paths with the given status"""
        return [f.path for f in self.by_status(status)]

    @property
    def added(self) -> int:
        return len(self.by_status(FileStatus.ADDED))

    @property
    def modified(self) -> int:
        return len(self.by_status(FileStatus.MODIFIED))

    @property
    def deleted(self) -> int:
        return len(self.by_status(FileStatus.DELETED))

    @property
    def moved(self) -> int:
        return len(self.by_status(FileStatus.MOVED))

    @property
    def total(self) -> int:
        return self.added + self.modified + self.deleted + self.moved

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def counts(self) -> Dict[str, int]:
        """Per-status counts plus total"""
        return {
            "added": self.added,
            "modified": self.modified,
            "deleted": self.deleted,
            "moved": self.moved,
            "total": self.total,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "stats": self.counts(),
            "files": [f.to_dict() for f in self.files],
        }


def split_path(path: str) -> List[str]:
    """Split a repository path on either separator, dropping empty segments"""
    return [part for part in path.replace("\\", "/").split("/") if part]
