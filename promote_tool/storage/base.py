# promote_tool/storage/base.py
"""Report storage abstract base class"""

from abc import ABC, abstractmethod
from datetime import datetime

from ..constants import REPORT_FILENAME_FORMAT


class ReportStorage(ABC):
    """Abstract base class for report storage backends"""

    def __init__(self, filename_format: str = REPORT_FILENAME_FORMAT):
        self.filename_format = filename_format
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize storage backend (e.g., create the target folder)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    def report_name(self, timestamp: datetime) -> str:
        """Identifier derived from the report timestamp"""
        return timestamp.strftime(self.filename_format)

    @abstractmethod
    async def save(self, content: str, timestamp: datetime) -> str:
        """
        Persist a report

        Args:
            content: Report text
            timestamp: Report time, used to derive the identifier

        Returns:
            Identifier of the stored report

        Raises:
            ReportExistsError: If a report with the same identifier exists
            ReportStorageError: On any other storage failure
        """
        pass

