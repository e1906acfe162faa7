"""
Destinations for downloaded content.

A sink receives each DownloadedFile once its transfer has completed and
decides how to persist it. The fetcher only depends on the DownloadSink
protocol; callers may plug in anything with an async ``save`` method.
"""

import os
import logging
from typing import List, Protocol, Tuple, runtime_checkable

from . import config
from .services.drive.types import DownloadedFile
from .utils.log_sanitizer import sanitize_for_logging

logger = logging.getLogger(__name__)

UNTITLED_NAME = "untitled"


@runtime_checkable
class DownloadSink(Protocol):
    """Receives downloaded files from the fetcher."""

    async def save(self, downloaded: DownloadedFile) -> None:
        ...


class MemorySink:
    """Keeps downloaded files in memory, in the order they arrive."""

    def __init__(self):
        self.files: List[DownloadedFile] = []

    async def save(self, downloaded: DownloadedFile) -> None:
        self.files.append(downloaded)

    def names(self) -> List[str]:
        return [downloaded.filename for downloaded in self.files]

    def __len__(self):
        return len(self.files)


def safe_path_segment(name: str) -> str:
    """
    Turn a Drive name into a single filesystem path segment.

    Drive names are free text and may contain slashes, which are replaced.
    Names that would still escape the parent directory are rejected.

    Raises:
        ValueError: If the name is a relative path reference such as '..'.
    """
    segment = name.replace("/", "_").replace("\\", "_").replace("\x00", "").strip()
    if not segment:
        return UNTITLED_NAME
    if segment in (".", ".."):
        raise ValueError(f"Security error: '{segment}' is not a valid name.")
    return segment


class FileSystemSink:
    """
    Writes downloaded files below a directory, mirroring the Drive folder structure.

    Security: every folder name and filename is reduced to a single path
    segment and the final path is checked to stay inside the target directory.
    Existing files are kept; a numbered suffix is added to the new file instead
    unless overwrite is set.
    """

    def __init__(self, directory: str = config.DOWNLOAD_DIR, overwrite: bool = False):
        self.directory = directory
        self.overwrite = overwrite
        self.saved_paths: List[str] = []

    async def save(self, downloaded: DownloadedFile) -> None:
        target_dir = self._target_directory(downloaded.folder_path)
        file_path = self._available_path(target_dir, safe_path_segment(downloaded.filename))

        sanitized = sanitize_for_logging(filename=downloaded.filename,
                                         folder_path=downloaded.folder_path)
        logger.info("Writing %s (%d bytes) to %s", sanitized['filename'], downloaded.size,
                    sanitized['folder_path'])
        try:
            with open(file_path, 'wb') as f:
                f.write(downloaded.content)
        except OSError as e:
            logger.error("Failed to write downloaded file. Check directory permissions.")
            logger.debug("File write error: %s", str(e)[:100])
            raise

        self.saved_paths.append(file_path)

    def _target_directory(self, folder_path: Tuple[str, ...]) -> str:
        if not os.path.exists(self.directory):
            os.makedirs(self.directory)
        if not os.path.isdir(self.directory):
            raise ValueError(f"Provided path '{self.directory}' is not a directory.")

        resolved_root = os.path.realpath(self.directory)
        target = os.path.join(resolved_root, *[safe_path_segment(name) for name in folder_path])
        self._ensure_inside(resolved_root, target)
        os.makedirs(target, exist_ok=True)
        return target

    def _available_path(self, directory: str, filename: str) -> str:
        file_path = os.path.join(directory, filename)
        self._ensure_inside(os.path.realpath(self.directory), file_path)
        if self.overwrite or not os.path.exists(file_path):
            return file_path

        stem, extension = os.path.splitext(filename)
        counter = 1
        while True:
            candidate = os.path.join(directory, f"{stem} ({counter}){extension}")
            if not os.path.exists(candidate):
                return candidate
            counter += 1

    @staticmethod
    def _ensure_inside(root: str, path: str) -> None:
        resolved_path = os.path.realpath(path)
        try:
            common_path = os.path.commonpath([root, resolved_path])
        except ValueError:
            # os.path.commonpath raises ValueError if paths are on different drives (Windows)
            raise ValueError("Security error: Path traversal detected in filename.")
        if common_path != root:
            raise ValueError("Security error: Path traversal detected in filename.")
