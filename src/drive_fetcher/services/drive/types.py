from enum import Enum
from typing import Optional, List, Tuple, Union
from dataclasses import dataclass, field


class EntryKind(Enum):
    """Kind of a Drive entry, derived from its MIME type."""
    FILE = "file"
    FOLDER = "folder"
    EXPORTABLE_DOCUMENT = "exportable_document"


@dataclass(frozen=True)
class RemoteEntry:
    """
    Represents a single entry returned by a Drive listing.
    Args:
        entry_id: The unique, store-assigned identifier of the entry.
        name: The display name of the entry.
        kind: Whether the entry is a file, a folder or a Google-native document.
        mime_type: The MIME type reported by Drive.
        size_bytes: Size of the content in bytes. Always None for folders.
    """
    entry_id: str
    name: str
    kind: EntryKind
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None

    def __post_init__(self):
        if self.kind is EntryKind.FOLDER and self.size_bytes is not None:
            object.__setattr__(self, "size_bytes", None)

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    def human_readable_size(self) -> str:
        """
        Get human-readable size.
        Returns:
            Size in human-readable format (e.g., "1.2 MB").
        """
        if self.size_bytes is None:
            return "Unknown"

        if self.size_bytes == 0:
            return "0 B"

        size = float(self.size_bytes)
        units = ["B", "KB", "MB", "GB", "TB"]
        unit_index = 0

        while size >= 1024 and unit_index < len(units) - 1:
            size /= 1024
            unit_index += 1

        return f"{size:.1f} {units[unit_index]}"

    def __str__(self):
        if self.is_folder:
            return f"[Folder] {self.name}"
        return f"{self.name} ({self.human_readable_size()})"


@dataclass(frozen=True)
class ListingResult:
    """
    One page of a Drive listing.
    Args:
        entries: Entries in the order Drive returned them.
        next_page: Token for the next page, or None when the listing is complete.
    """
    entries: Tuple[RemoteEntry, ...] = ()
    next_page: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.next_page is not None

    def __len__(self):
        return len(self.entries)


@dataclass(frozen=True)
class DownloadedFile:
    """
    Content of a downloaded file or exported document.
    Args:
        entry: The entry that was downloaded.
        filename: Suggested filename for the sink.
        content: The transferred bytes.
        mime_type: MIME type of the content (the export format for exported documents).
        folder_path: Names of the folders between the download root and this file.
    """
    entry: RemoteEntry
    filename: str
    content: bytes
    mime_type: Optional[str] = None
    folder_path: Tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.content)

    def __repr__(self):
        return (f"DownloadedFile(filename={self.filename!r}, size={self.size}, "
                f"folder_path={self.folder_path!r})")


@dataclass(frozen=True)
class DownloadFailure:
    """A child of a folder download that could not be downloaded or listed."""
    entry: RemoteEntry
    error: Exception


@dataclass
class FolderDownloadResult:
    """
    Outcome of a recursive folder download.
    Args:
        count: Number of files downloaded successfully.
        failures: Entries that failed, with the error each raised, in processing order.
        cancelled: True if the operation stopped early because cancellation was requested.
    """
    count: int = 0
    failures: List[DownloadFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def errors(self) -> List[DownloadFailure]:
        return self.failures

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    def __str__(self):
        status = " (cancelled)" if self.cancelled else ""
        return f"{self.count} downloaded, {len(self.failures)} failed{status}"


ProgressItem = Union[DownloadedFile, DownloadFailure]
