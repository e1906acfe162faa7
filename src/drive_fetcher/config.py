"""
Runtime settings for the drive fetcher.

Every value can be overridden through an environment variable so that the
same code runs unchanged in development, CI and production.
"""

import os

from .exceptions import ValidationError


def _int_from_env(name: str, default: int) -> int:
    """Read an integer setting, naming the variable when its value is not a number."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {value!r}") from None


# Listing
PAGE_SIZE = _int_from_env("DRIVE_FETCHER_PAGE_SIZE", 20)

# Target format for Google-native documents (Docs, Sheets, Slides, ...)
EXPORT_MIME_TYPE = os.getenv("DRIVE_FETCHER_EXPORT_MIME_TYPE", "application/pdf")

# Default directory used by FileSystemSink when none is given
DOWNLOAD_DIR = os.getenv("DRIVE_FETCHER_DOWNLOAD_DIR", "./downloads")
