# promote_tool/core/discovery.py
"""Git installation discovery"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from ..constants import ENV_LOCALAPPDATA

logger = logging.getLogger(__name__)

WINDOWS_PATHS = [
    r"C:\Program Files\Git\cmd\git.exe",
    r"C:\Program Files (x86)\Git\cmd\git.exe",
    r"C:\Program Files\Git\bin\git.exe",
    r"C:\Program Files (x86)\Git\bin\git.exe",
]

MACOS_PATHS = [
    "/opt/homebrew/bin/git",
    "/usr/local/bin/git",
    "/Library/Developer/CommandLineTools/usr/bin/git",
    "/Applications/Xcode.app/Contents/Developer/usr/bin/git",
    "/usr/bin/git",
]

LINUX_PATHS = [
    "/usr/bin/git",
    "/usr/local/bin/git",
    "~/.local/bin/git",
    "/snap/bin/git",
]


class GitDiscovery:
    """List candidate git executables for the host OS"""

    def __init__(self, platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        self.platform = platform or sys.platform
        self.environ = os.environ if environ is None else environ

    def candidates(self) -> List[str]:
        """All well-known locations, existing or not"""
        if self.platform.startswith("win"):
            paths = list(WINDOWS_PATHS)
            local = self.environ.get(ENV_LOCALAPPDATA)
            if local:
                paths.append(str(Path(local) / "Programs" / "Git" / "cmd" / "git.exe"))
                paths.append(str(Path(local) / "Programs" / "Git" / "bin" / "git.exe"))
                paths.extend(self._desktop_bundles(Path(local) / "GitHubDesktop"))
            return paths

        if self.platform == "darwin":
            return list(MACOS_PATHS)

        return [str(Path(p).expanduser()) for p in LINUX_PATHS]

    def discover(self) -> List[str]:
        """
        Candidate paths that exist on disk

        Returns:
            Paths in probing order, without duplicates
        """
        found = []
        for candidate in self.candidates():
            if candidate not in found and Path(candidate).is_file():
                found.append(candidate)

        logger.debug(f"Discovered git candidates: {found}")
        return found

    @staticmethod
    def _desktop_bundles(base: Path) -> List[str]:
        if not base.is_dir():
            return []
        return [
            str(bundle / "resources" / "app" / "git" / "cmd" / "git.exe")
            for bundle in sorted(base.iterdir())
            if bundle.name.startswith("app-")
        ]
