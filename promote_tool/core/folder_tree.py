# promote_tool/core/folder_tree.py
"""Group changed paths into a nested folder structure"""

from ..constants import ROOT_FOLDER_LABEL
from ..models.change import ChangeSet, STATUS_ORDER, split_path
from ..models.folder import FolderFile, FolderNode


class FolderTreeBuilder:
    """Build a display tree from a change set"""

    def __init__(self, root_label: str = ROOT_FOLDER_LABEL):
        self.root_label = root_label

    def build(self, change_set: ChangeSet) -> FolderNode:
        """
        Build the folder tree

        Files are inserted in status order (added, modified, deleted, moved).
        Root-level files are grouped under a synthetic root folder.

        Args:
            change_set: Classified changes

        Returns:
            Root FolderNode
        """
        root = FolderNode()

        for status in STATUS_ORDER:
            for change in change_set.by_status(status):
                parts = split_path(change.path)
                if not parts:
                    continue

                folders, name = parts[:-1], parts[-1]
                if folders:
                    node = root
                    for folder in folders:
                        node = node.child(folder)
                else:
                    node = root.child(self.root_label)

                node.files.append(FolderFile(name=name, path=change.path, status=status))

        return root
