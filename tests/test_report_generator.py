"""Tests for change report rendering"""

from promote_tool.core.folder_tree import FolderTreeBuilder
from promote_tool.core.report_generator import ReportGenerator, ReportMetadata, strip_extension
from promote_tool.models import ChangeSet, FileChange, FileStatus

from .conftest import FIXED_NOW


def build_report(change_set, metadata=None):
    tree = FolderTreeBuilder().build(change_set)
    return ReportGenerator().generate(change_set, tree, metadata, FIXED_NOW)


def sample_change_set():
    return ChangeSet([
        FileChange("notes/new.md", FileStatus.ADDED, "@@ -0,0 +1 @@\n+hello"),
        FileChange("top.md", FileStatus.MODIFIED, "@@ -1 +1 @@\n-a\n+b"),
        FileChange("notes/sub/moved.md", FileStatus.MOVED, "diff --git a/x.md b/notes/sub/moved.md",
                   old_path="x.md"),
        FileChange("gone.md", FileStatus.DELETED, ""),
    ])


def test_title_and_links():
    metadata = ReportMetadata(
        repository_url="https://github.com/acme/notes",
        history_url="https://github.com/acme/notes/commits/main",
    )
    report = build_report(sample_change_set(), metadata)

    assert report.startswith("# Change Report - 2024-05-17 09:30:15\n\n")
    assert "**Repository:** https://github.com/acme/notes  \n" in report
    assert "**History:** https://github.com/acme/notes/commits/main  \n" in report
    assert "Merge Request" not in report


def test_summary_counts():
    report = build_report(sample_change_set())

    assert "**Total Changes:** 4 files" in report
    assert "- 🟢 1 added" in report
    assert "- 🔵 1 modified" in report
    assert "- 🔄 1 moved" in report
    assert "- 🔴 1 deleted" in report


def test_folder_tree_block():
    report = build_report(sample_change_set())
    tree = report.split("### Folder Tree\n\n```\n", 1)[1].split("```", 1)[0]

    assert tree.splitlines() == [
        "├── 📁 **notes**",
        "│   ├── 🟢 new.md",
        "│   └── 📁 **sub**",
        "│       └── 🟡 moved.md",
        "└── 📁 **(root)**",
        "    ├── 🔵 top.md",
        "    └── 🔴 gone.md",
    ]


def test_file_sections_strip_extensions_and_show_origin():
    report = build_report(sample_change_set())

    assert "> [!abstract]- 🟢 new\n> **📁 Folder:** notes\n> **📄 Path:** notes/new\n" in report
    assert "> **📤 Moved from:** x\n" in report
    assert "> [!note]- 🔵 top\n> **📁 Folder:** (root)\n" in report
    assert "> ```diff\n> @@ -1 +1 @@\n> -a\n> +b\n> ```" in report


def test_files_without_body_have_no_section():
    report = build_report(sample_change_set())

    assert "[!failure]" not in report


def test_report_is_deterministic():
    metadata = ReportMetadata(merge_request_url="https://github.com/acme/notes/pull/3")

    assert build_report(sample_change_set(), metadata) == build_report(sample_change_set(), metadata)


def test_empty_change_set_has_no_changes_section():
    report = build_report(ChangeSet())

    assert "**Total Changes:** 0 files" in report
    assert "## Changes" not in report


def test_strip_extension():
    assert strip_extension("a/b.md") == "a/b"
    assert strip_extension("a.tar.gz") == "a.tar"
    assert strip_extension("v1.0/readme") == "v1.0/readme"
