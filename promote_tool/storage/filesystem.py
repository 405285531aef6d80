# promote_tool/storage/filesystem.py
"""Filesystem report storage"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Union

import aiofiles

from .base import ReportStorage
from ..api.exceptions import ReportExistsError, ReportStorageError
from ..utils.file_utils import classify_os_error

logger = logging.getLogger(__name__)


class FilesystemReportStorage(ReportStorage):
    """Store reports as markdown files in one folder"""

    def __init__(self, base_dir: Union[str, Path], **kwargs):
        """
        Initialize filesystem storage

        Args:
            base_dir: Folder receiving the reports, created on first save
        """
        super().__init__(**kwargs)
        self.base_dir = Path(base_dir)

    async def _do_initialize(self) -> None:
        """Ensure the report folder exists"""
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ReportStorageError(
                f"Cannot create report folder {self.base_dir}: {e.strerror or e}",
                classify_os_error(e),
                str(self.base_dir)
            ) from e

    async def save(self, content: str, timestamp: datetime) -> str:
        await self.initialize()

        filename = self.report_name(timestamp)
        path = self.base_dir / filename

        try:
            # Exclusive create: never overwrite an earlier report
            async with aiofiles.open(path, "x", encoding="utf-8") as f:
                await f.write(content)
        except FileExistsError as e:
            raise ReportExistsError(str(path)) from e
        except OSError as e:
            raise ReportStorageError(
                f"Cannot write report {path}: {e.strerror or e}",
                classify_os_error(e),
                str(path)
            ) from e

        logger.info(f"Report saved to {path}")
        return filename

