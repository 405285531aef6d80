"""Folder tree models for change reports"""

from dataclasses import dataclass, field
from typing import Dict, List

from .change import FileStatus


@dataclass(frozen=True)
class FolderFile:
    """A file leaf in the folder tree"""
    name: str
    path: str
    status: FileStatus


@dataclass
class FolderNode:
    """Folder with its files and nested subfolders (insertion ordered)"""

    files: List[FolderFile] = field(default_factory=list)
    subfolders: Dict[str, 'FolderNode'] = field(default_factory=dict)

    def child(self, name: str) -> 'FolderNode':
        """Get or create a subfolder"""
        node = self.subfolders.get(name)
        if node is None:
            node = FolderNode()
            self.subfolders[name] = node
        return node

    def walk_files(self) -> List[FolderFile]:
        """All files below this node, depth first"""
        collected = list(self.files)
        for node in self.subfolders.values():
            collected.extend(node.walk_files())
        return collected

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.subfolders
