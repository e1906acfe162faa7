"""
Async Google Drive tree fetcher.

Lists Drive content page by page and downloads files, exported documents
and whole folder trees with a caller-supplied bearer credential.

Usage:
    service = DriveApiService()

    async for entry in service.accumulate_all(token):
        print(entry)

    result = await service.download_folder(token, folder_id, FileSystemSink("./downloads"))
"""

from .exceptions import (
    DriveFetcherError, AuthError, APIError, ValidationError,
    TransientNetworkError, NotFoundError, MalformedResponseError, PermissionDeniedError
)
from .services.drive import (
    DriveApiService, EntryKind, RemoteEntry, ListingResult, DownloadedFile,
    DownloadFailure, FolderDownloadResult, ROOT_SCOPE
)
from .sinks import DownloadSink, MemorySink, FileSystemSink
from .utils.retry import retry_transient

__version__ = "0.1.0"

__all__ = [
    "DriveApiService",
    "EntryKind",
    "RemoteEntry",
    "ListingResult",
    "DownloadedFile",
    "DownloadFailure",
    "FolderDownloadResult",
    "ROOT_SCOPE",
    "DownloadSink",
    "MemorySink",
    "FileSystemSink",
    "retry_transient",
    "DriveFetcherError",
    "AuthError",
    "APIError",
    "ValidationError",
    "TransientNetworkError",
    "NotFoundError",
    "MalformedResponseError",
    "PermissionDeniedError",
]
