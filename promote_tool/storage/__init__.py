"""Report storage backends"""

from .base import ReportStorage
from .filesystem import FilesystemReportStorage

__all__ = [
    "ReportStorage",
    "FilesystemReportStorage",
]
