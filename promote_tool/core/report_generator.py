# promote_tool/core/report_generator.py
"""Markdown change report rendering"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..constants import (
    EMOJI_FILE,
    EMOJI_FOLDER,
    EMOJI_MOVED_FROM,
    REPORT_TIMESTAMP_FORMAT,
    ROOT_FOLDER_LABEL,
    STATUS_CALLOUTS,
    STATUS_MARKERS,
)
from ..models.change import ChangeSet, FileChange, split_path
from ..models.folder import FolderNode

EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")
SUMMARY_MOVED_MARKER = "🔄"

BRANCH_LAST = "└── "
BRANCH_MID = "├── "
INDENT_LAST = "    "
INDENT_MID = "│   "


@dataclass(frozen=True)
class ReportMetadata:
    """Optional links rendered under the report title"""
    repository_url: Optional[str] = None
    history_url: Optional[str] = None
    merge_request_url: Optional[str] = None


def strip_extension(path: str) -> str:
    """Drop the last file extension so the host application does not link it"""
    return EXTENSION_PATTERN.sub("", path)


class ReportGenerator:
    """Compose the change report text

    Output depends only on the arguments; the timestamp is injected.
    """

    def __init__(self, timestamp_format: str = REPORT_TIMESTAMP_FORMAT):
        self.timestamp_format = timestamp_format

    def generate(self,
                 change_set: ChangeSet,
                 folder_tree: FolderNode,
                 metadata: Optional[ReportMetadata],
                 timestamp: datetime) -> str:
        """
        Generate report text

        Args:
            change_set: Classified changes
            folder_tree: Tree built from the same change set
            metadata: Repository links, may be None
            timestamp: Report time

        Returns:
            Markdown report
        """
        parts = [self.render_title(metadata, timestamp)]
        parts.append(self.render_summary(change_set, folder_tree))

        sections = [self.render_file(change) for change in change_set.files]
        sections = [s for s in sections if s]
        if sections:
            parts.append("## Changes\n\n" + "".join(sections))

        return "".join(parts)

    def render_title(self, metadata: Optional[ReportMetadata], timestamp: datetime) -> str:
        text = f"# Change Report - {timestamp.strftime(self.timestamp_format)}\n\n"

        if metadata is None:
            return text

        links = []
        if metadata.repository_url:
            links.append(f"**Repository:** {metadata.repository_url}")
        if metadata.history_url:
            links.append(f"**History:** {metadata.history_url}")
        if metadata.merge_request_url:
            links.append(f"**Merge Request:** {metadata.merge_request_url}")

        if links:
            text += "\n".join(f"{link}  " for link in links) + "\n\n"
        return text

    def render_summary(self, change_set: ChangeSet, folder_tree: FolderNode) -> str:
        lines = [
            "## Summary",
            "",
            f"**Total Changes:** {change_set.total} files",
            f"- {STATUS_MARKERS['added']} {change_set.added} added",
            f"- {STATUS_MARKERS['modified']} {change_set.modified} modified",
            f"- {SUMMARY_MOVED_MARKER} {change_set.moved} moved",
            f"- {STATUS_MARKERS['deleted']} {change_set.deleted} deleted",
            "",
            "### Folder Tree",
            "",
            "```",
        ]
        lines.extend(self.render_tree(folder_tree))
        lines.append("```")
        return "\n".join(lines) + "\n\n"

    def render_tree(self, node: FolderNode, indent: str = "") -> List[str]:
        """Render the subfolders of ``node`` with box-drawing branches"""
        lines = []
        entries = list(node.subfolders.items())

        for index, (name, child) in enumerate(entries):
            is_last = index == len(entries) - 1
            lines.append(f"{indent}{BRANCH_LAST if is_last else BRANCH_MID}{EMOJI_FOLDER} **{name}**")
            child_indent = indent + (INDENT_LAST if is_last else INDENT_MID)

            for file_index, leaf in enumerate(child.files):
                last_file = file_index == len(child.files) - 1 and not child.subfolders
                branch = BRANCH_LAST if last_file else BRANCH_MID
                lines.append(f"{child_indent}{branch}{STATUS_MARKERS[leaf.status.value]} {leaf.name}")

            if child.subfolders:
                lines.extend(self.render_tree(child, child_indent))

        return lines

    def render_file(self, change: FileChange) -> str:
        """Collapsible section for one file, empty when there is no diff body"""
        if not change.change_text or not change.change_text.strip():
            return ""

        status = change.status.value
        parts = split_path(change.path)
        folder = "/".join(parts[:-1]) if len(parts) > 1 else ROOT_FOLDER_LABEL
        name = parts[-1] if parts else change.path

        lines = [
            f"> [!{STATUS_CALLOUTS[status]}]- {STATUS_MARKERS[status]} {strip_extension(name)}",
            f"> **{EMOJI_FOLDER} Folder:** {folder}",
            f"> **{EMOJI_FILE} Path:** {strip_extension(change.path)}",
        ]
        if change.old_path:
            lines.append(f"> **{EMOJI_MOVED_FROM} Moved from:** {strip_extension(change.old_path)}")

        lines.append(">")
        lines.append("> ```diff")
        lines.extend(f"> {line}" for line in change.change_text.split("\n"))
        lines.append("> ```")

        return "\n".join(lines) + "\n\n"
