# promote_tool/core/diff_classifier.py
"""Classify unified diff output into typed file changes"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..constants import DEFAULT_APP_CONFIG_DIR, DEFAULT_REPORT_DIR, GIT_METADATA_DIR
from ..models.change import ChangeSet, FileChange, FileStatus, split_path

logger = logging.getLogger(__name__)

SECTION_PREFIX = "diff --git "
HEADER_PATTERN = re.compile(r'^("?a/.+?"?) ("?b/.+?"?)$')
SIMILARITY_PATTERN = re.compile(r"^similarity index (\d+)%")
NULL_PATHS = ("/dev/null", "dev/null")
BODY_PREFIXES = ("@@", "+++", "---")
ESCAPE_PATTERN = re.compile(r'\\([0-7]{3}|.)')
GIT_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n",
    "r": "\r", "t": "\t", "v": "\v", '"': '"', "\\": "\\",
}


class _LineState(Enum):
    """Position inside a single file section"""
    EXTENDED = "extended"
    BODY = "body"


@dataclass
class SectionHeader:
    """Path tokens from the per-file header line"""
    from_path: str
    to_path: str


@dataclass
class SectionMarkers:
    """Extended header markers found before the diff body"""
    similarity: Optional[int] = None
    rename_from: Optional[str] = None
    rename_to: Optional[str] = None
    new_file: bool = False
    deleted_file: bool = False
    minus_path: Optional[str] = None
    plus_path: Optional[str] = None

    @property
    def is_rename(self) -> bool:
        return self.rename_from is not None and self.rename_to is not None


@dataclass
class DiffSection:
    """One file section of a diff"""
    header_line: str
    lines: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join([self.header_line] + self.lines)


def split_sections(diff_text: str) -> List[DiffSection]:
    """Split raw diff text into per-file sections

    Lines before the first header are ignored.
    """
    sections: List[DiffSection] = []
    current: Optional[DiffSection] = None

    for line in diff_text.splitlines():
        if line.startswith(SECTION_PREFIX):
            current = DiffSection(header_line=line)
            sections.append(current)
        elif current is not None:
            current.lines.append(line)

    return sections


def unquote_path(token: str) -> str:
    """Decode a path git wrapped in quotes

    Quoted paths use C-style escapes, with bytes outside printable ASCII
    written as octal. Unquoted tokens are returned as they are.
    """
    token = token.strip()
    if len(token) < 2 or not (token.startswith('"') and token.endswith('"')):
        return token

    body = token[1:-1]
    decoded = bytearray()
    pos = 0
    for match in ESCAPE_PATTERN.finditer(body):
        decoded += body[pos:match.start()].encode("utf-8")
        code = match.group(1)
        if len(code) == 3:
            decoded.append(int(code, 8))
        else:
            decoded += GIT_ESCAPES.get(code, code).encode("utf-8")
        pos = match.end()
    decoded += body[pos:].encode("utf-8")
    return decoded.decode("utf-8", errors="replace")


def parse_header(header_line: str) -> Optional[SectionHeader]:
    """Extract the a/ and b/ path tokens from a header line"""
    match = HEADER_PATTERN.match(header_line[len(SECTION_PREFIX):])
    if not match:
        return None
    from_token = unquote_path(match.group(1))
    to_token = unquote_path(match.group(2))
    return SectionHeader(from_path=from_token[2:], to_path=to_token[2:])


def _strip_prefix(token: str) -> str:
    """Path of a ``---``/``+++`` line without its a/ or b/ prefix"""
    token = unquote_path(token)
    if token in NULL_PATHS:
        return token
    if token.startswith(("a/", "b/")):
        return token[2:]
    return token


def scan_section(section: DiffSection) -> Tuple[SectionMarkers, Optional[int]]:
    """Walk the section lines, collecting markers until the body starts

    Returns:
        Markers and the index (into ``section.lines``) where the body starts,
        or None if the section has no body
    """
    markers = SectionMarkers()
    state = _LineState.EXTENDED
    body_start = None

    for index, line in enumerate(section.lines):
        if state == _LineState.EXTENDED:
            if line.startswith(BODY_PREFIXES):
                state = _LineState.BODY
                body_start = index
            else:
                _read_marker(line, markers)
                continue

        if line.startswith("--- ") and markers.minus_path is None:
            markers.minus_path = _strip_prefix(line[4:])
        elif line.startswith("+++ ") and markers.plus_path is None:
            markers.plus_path = _strip_prefix(line[4:])
        elif line.startswith("@@"):
            # Hunk content follows; no more file-level markers
            break

    return markers, body_start


def _read_marker(line: str, markers: SectionMarkers) -> None:
    lowered = line.lower()

    similarity = SIMILARITY_PATTERN.match(lowered)
    if similarity:
        if markers.similarity is None:
            markers.similarity = int(similarity.group(1))
    elif lowered.startswith("rename from "):
        if markers.rename_from is None:
            markers.rename_from = unquote_path(line[len("rename from "):])
    elif lowered.startswith("rename to "):
        if markers.rename_to is None:
            markers.rename_to = unquote_path(line[len("rename to "):])
    elif lowered.startswith("new file mode"):
        markers.new_file = True
    elif lowered.startswith("deleted file mode"):
        markers.deleted_file = True


def classify_section(header: SectionHeader,
                     markers: SectionMarkers) -> Tuple[FileStatus, str, Optional[str]]:
    """Apply the classification priority to one section

    Returns:
        Tuple of (status, path, old_path)
    """
    from_null = header.from_path in NULL_PATHS or markers.minus_path in NULL_PATHS
    to_null = header.to_path in NULL_PATHS or markers.plus_path in NULL_PATHS

    if markers.is_rename:
        if markers.similarity == 100:
            return FileStatus.MOVED, header.to_path, markers.rename_from
        return FileStatus.MODIFIED, header.to_path, markers.rename_from

    if from_null:
        return FileStatus.ADDED, header.to_path, None

    if to_null:
        return FileStatus.DELETED, header.from_path, None

    if markers.new_file:
        return FileStatus.ADDED, header.to_path, None

    if markers.deleted_file:
        return FileStatus.DELETED, header.from_path, None

    return FileStatus.MODIFIED, header.to_path, None


class DiffClassifier:
    """Turn raw diff text into a ChangeSet

    Paths under the version-control metadata directory, the application
    configuration directory, the report directory, and any other
    dot-prefixed top-level entry are excluded from the result.
    """

    def __init__(self, protected_names: Iterable[str] = None):
        if protected_names is None:
            protected_names = (GIT_METADATA_DIR, DEFAULT_APP_CONFIG_DIR, DEFAULT_REPORT_DIR)
        self.protected_names = frozenset(protected_names)

    def is_excluded(self, path: str) -> bool:
        """Check whether a path must be left out of the change set"""
        parts = split_path(path)
        if not parts:
            return True
        top = parts[0]
        return top.startswith(".") or top in self.protected_names

    def classify(self, diff_text: str) -> ChangeSet:
        """
        Classify diff output

        Args:
            diff_text: Raw diff output covering any number of files

        Returns:
            ChangeSet with files in diff order
        """
        if not diff_text or not diff_text.strip():
            return ChangeSet()

        files: List[FileChange] = []
        skipped = 0

        for section in split_sections(diff_text):
            header = parse_header(section.header_line)
            if header is None:
                logger.debug(f"Skipping unparsable diff header: {section.header_line!r}")
                skipped += 1
                continue

            markers, body_start = scan_section(section)
            status, path, old_path = classify_section(header, markers)

            if self.is_excluded(path):
                logger.debug(f"Excluding {path} from change set")
                continue

            if body_start is None:
                change_text = section.text
            else:
                change_text = "\n".join(section.lines[body_start:])

            files.append(FileChange(
                path=path,
                status=status,
                change_text=change_text,
                old_path=old_path,
            ))

        if skipped:
            logger.warning(f"Skipped {skipped} diff section(s) without valid paths")

        return ChangeSet(files=files)
