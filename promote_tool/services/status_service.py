"""Repository status diagnostics"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import DEFAULT_REMOTE_NAME
from ..core.git_client import GitClient
from ..core.git_runner import GitRunner, redact
from ..models.config import PromoteConfig
from ..utils.file_utils import visible_entries

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10


@dataclass
class TreeStatus:
    """Snapshot of one tree"""
    label: str
    path: Path
    exists: bool = False
    is_repository: bool = False
    branch: Optional[str] = None
    remote_url: Optional[str] = None
    last_commit: Optional[str] = None
    changes: List[str] = field(default_factory=list)
    entries: List[str] = field(default_factory=list)

    @property
    def entry_sample(self) -> List[str]:
        return self.entries[:SAMPLE_SIZE]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "label": self.label,
            "path": str(self.path),
            "exists": self.exists,
            "is_repository": self.is_repository,
            "branch": self.branch,
            "remote_url": self.remote_url,
            "last_commit": self.last_commit,
            "changes": len(self.changes),
            "entries": len(self.entries),
        }


class StatusService:
    """Collect branch, status and content information for both trees"""

    def __init__(self, config: PromoteConfig, runner: Optional[GitRunner] = None):
        self.config = config
        self.runner = runner or GitRunner(config.git_executable)

    async def collect(self) -> List[TreeStatus]:
        """Status of the working tree, then the production tree"""
        return [
            await self.tree_status("Working", self.config.working_root),
            await self.tree_status("Production", self.config.production_root),
        ]

    async def tree_status(self, label: str, path: Path) -> TreeStatus:
        status = TreeStatus(label=label, path=path)
        if not path.is_dir():
            return status

        status.exists = True
        status.entries = visible_entries(path)

        client = GitClient(self.runner, path, DEFAULT_REMOTE_NAME)
        status.is_repository = await client.is_repository()
        if not status.is_repository:
            return status

        status.branch = await client.current_branch()
        remote_url = await client.remote_url()
        status.remote_url = redact(remote_url) if remote_url else None
        status.last_commit = await client.last_commit()
        status.changes = await client.status_short()

        logger.debug(f"{label} tree: branch={status.branch}, {len(status.changes)} change(s)")
        return status
