"""
Unit tests for log sanitization utilities.

Tests that bearer tokens, Drive ids and file names never reach log records verbatim.
"""

import logging

import pytest
from drive_fetcher.utils.log_sanitizer import (
    sanitize_token,
    sanitize_file_id,
    sanitize_filename,
    sanitize_folder_path,
    sanitize_for_logging
)


class TestTokenSanitization:
    """Test bearer token sanitization."""

    def test_token_is_hidden(self):
        result = sanitize_token("ya29.secret-token-value")
        assert result == "[token] (23 chars)"
        assert "secret" not in result

    def test_missing_token(self):
        assert sanitize_token("") == "[no-token]"
        assert sanitize_token(None) == "[no-token]"


class TestFileIdSanitization:
    """Test Drive id sanitization."""

    def test_short_id(self):
        assert sanitize_file_id("root") == "[id: root]"

    def test_long_id_is_truncated(self):
        result = sanitize_file_id("1A2b3C4d5E6f7G8h9I0j")
        assert result == "[id: 1A2b3C...9I0j]"

    def test_missing_id(self):
        assert sanitize_file_id(None) == "[no-id]"


class TestFilenameSanitization:
    """Test filename sanitization."""

    def test_filename_with_extension(self):
        assert sanitize_filename("salary-2024.xlsx") == "[file.xlsx] (16 chars)"

    def test_filename_without_extension(self):
        assert sanitize_filename("Meeting notes") == "[file] (13 chars)"

    def test_missing_filename(self):
        assert sanitize_filename("") == "[no-filename]"


class TestFolderPathSanitization:
    """Test folder path sanitization."""

    def test_root(self):
        assert sanitize_folder_path(()) == "[root]"

    def test_nested(self):
        result = sanitize_folder_path(("Medical", "Scans"))
        assert result == "[depth 2]"
        assert "Medical" not in result


class TestSanitizeForLogging:
    """Test sanitizing several fields at once."""

    def test_mixed_fields(self):
        result = sanitize_for_logging(
            credential="ya29.secret",
            folder_id="root",
            filename="taxes.pdf",
            page_token="opaque",
            folder_path=("A",),
            page_size=20
        )

        assert result == {
            "credential": "[token] (11 chars)",
            "folder_id": "[id: root]",
            "filename": "[file.pdf] (9 chars)",
            "page_token": "[page-token]",
            "folder_path": "[depth 1]",
            "page_size": 20,
        }

    def test_no_page_token(self):
        assert sanitize_for_logging(page_token=None) == {"page_token": None}


@pytest.mark.asyncio
async def test_service_logs_never_contain_token(caplog, bearer_token, fake_drive, mock_get_async_drive_service):
    """End to end: listing and downloading leave no token or file name in the logs."""
    from conftest import make_file
    from drive_fetcher.services.drive import DriveApiService

    fake_drive.add_folder("root", [make_file("file_1", "private-diary.txt")])
    service = DriveApiService()

    with caplog.at_level(logging.DEBUG, logger="drive_fetcher"):
        page = await service.list_page(bearer_token)
        await service.download_entry(bearer_token, page.entries[0])

    assert caplog.records
    assert bearer_token not in caplog.text
    assert "private-diary" not in caplog.text
