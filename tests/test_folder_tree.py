"""Tests for the folder tree builder"""

from promote_tool.core.folder_tree import FolderTreeBuilder
from promote_tool.models import ChangeSet, FileChange, FileStatus


def test_nested_path_builds_nested_folders():
    change_set = ChangeSet([FileChange("a/b/c.txt", FileStatus.ADDED)])
    root = FolderTreeBuilder().build(change_set)

    assert root.files == []
    assert list(root.subfolders) == ["a"]
    a = root.subfolders["a"]
    assert a.files == []
    b = a.subfolders["b"]
    assert [(f.name, f.status) for f in b.files] == [("c.txt", FileStatus.ADDED)]
    assert b.subfolders == {}


def test_root_files_grouped_under_root_label():
    change_set = ChangeSet([
        FileChange("readme.md", FileStatus.MODIFIED),
        FileChange("docs/guide.md", FileStatus.ADDED),
    ])
    root = FolderTreeBuilder().build(change_set)

    assert root.files == []
    assert [f.path for f in root.subfolders["(root)"].files] == ["readme.md"]


def test_files_inserted_in_status_order():
    change_set = ChangeSet([
        FileChange("n/moved.md", FileStatus.MOVED, old_path="o/moved.md"),
        FileChange("n/deleted.md", FileStatus.DELETED),
        FileChange("n/modified.md", FileStatus.MODIFIED),
        FileChange("n/added.md", FileStatus.ADDED),
    ])
    root = FolderTreeBuilder().build(change_set)

    assert [f.name for f in root.subfolders["n"].files] == [
        "added.md", "modified.md", "deleted.md", "moved.md"
    ]


def test_walk_files_and_empty_tree():
    assert FolderTreeBuilder().build(ChangeSet()).is_empty

    change_set = ChangeSet([
        FileChange("x/1.md", FileStatus.ADDED),
        FileChange("x/y/2.md", FileStatus.ADDED),
    ])
    root = FolderTreeBuilder(root_label="/").build(change_set)
    assert sorted(f.path for f in root.walk_files()) == ["x/1.md", "x/y/2.md"]
