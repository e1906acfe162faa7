"""Google Drive listing and download service."""

from .api_service import DriveApiService
from .types import (
    EntryKind, RemoteEntry, ListingResult, DownloadedFile,
    DownloadFailure, FolderDownloadResult
)
from .constants import ROOT_SCOPE

__all__ = [
    # Service layer
    "DriveApiService",

    # Data types
    "EntryKind",
    "RemoteEntry",
    "ListingResult",
    "DownloadedFile",
    "DownloadFailure",
    "FolderDownloadResult",

    # Constants
    "ROOT_SCOPE",
]
