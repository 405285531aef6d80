"""Tests for report storage"""

import pytest

from promote_tool.api.exceptions import ReportExistsError, ReportStorageError
from promote_tool.storage.filesystem import FilesystemReportStorage

from .conftest import FIXED_NOW


@pytest.mark.asyncio
async def test_save_creates_folder_and_names_file(tmp_path):
    storage = FilesystemReportStorage(tmp_path / "Update Logs")

    report_id = await storage.save("# Report\n", FIXED_NOW)

    assert report_id == "2024-05-17-09-30-15-change-report.md"
    assert (tmp_path / "Update Logs" / report_id).read_text(encoding="utf-8") == "# Report\n"


@pytest.mark.asyncio
async def test_existing_report_is_never_overwritten(tmp_path):
    storage = FilesystemReportStorage(tmp_path)
    await storage.save("first", FIXED_NOW)

    with pytest.raises(ReportExistsError):
        await storage.save("second", FIXED_NOW)

    assert (tmp_path / storage.report_name(FIXED_NOW)).read_text(encoding="utf-8") == "first"


@pytest.mark.asyncio
async def test_unusable_report_folder_raises_storage_error(tmp_path):
    blocker = tmp_path / "Update Logs"
    blocker.write_text("not a folder", encoding="utf-8")
    storage = FilesystemReportStorage(blocker)

    with pytest.raises(ReportStorageError) as exc_info:
        await storage.save("# Report\n", FIXED_NOW)

    assert exc_info.value.path == str(blocker)
