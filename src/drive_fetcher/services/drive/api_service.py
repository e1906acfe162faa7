import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, AsyncIterator, Callable, Iterable, List

from ...auth.credentials import async_drive_service, send_authorized, CredentialLike
from ...exceptions import (
    DriveFetcherError, AuthError, APIError, ValidationError, MalformedResponseError
)
from ...sinks import DownloadSink
from ...utils.log_sanitizer import sanitize_for_logging
from ... import config
from .types import (
    RemoteEntry, ListingResult, EntryKind, DownloadedFile, DownloadFailure,
    FolderDownloadResult, ProgressItem
)
from .constants import ROOT_SCOPE, MAX_PAGE_SIZE, LIST_FIELDS
from . import utils

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressItem], None]


class _BytesPipe:
    """Writable target for aiogoogle's pipe_to; collects the raw response body."""

    def __init__(self):
        self._buffer = bytearray()

    async def write(self, data: bytes) -> None:
        self._buffer.extend(data)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


@dataclass
class _PendingFolder:
    """A folder on the traversal stack whose children are still being consumed."""
    children: AsyncIterator[RemoteEntry]
    path: tuple
    entry: Optional[RemoteEntry] = None


class DriveApiService:
    """
    Service layer for listing and downloading Google Drive content.

    The service holds no credential and no listing state: every operation
    takes the caller's bearer credential explicitly and pagination state is
    carried by page tokens or by the async iterators it returns.
    """

    def __init__(self, page_size: int = config.PAGE_SIZE,
                 export_mime_type: str = config.EXPORT_MIME_TYPE):
        """
        Initialize the Drive service.

        Args:
            page_size: Number of entries requested per listing call.
            export_mime_type: Format Google-native documents are exported to.
        """
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise ValidationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if not export_mime_type:
            raise ValidationError("export_mime_type must be a non-empty MIME type")

        self._page_size = page_size
        self._export_mime_type = export_mime_type

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def export_mime_type(self) -> str:
        return self._export_mime_type

    # Listing
    async def list_page(
            self,
            credential: CredentialLike,
            scope: str = ROOT_SCOPE,
            page_token: Optional[str] = None
    ) -> ListingResult:
        """
        Fetches one page of the direct children of a scope.

        Args:
            credential: Bearer credential for this call.
            scope: 'root' or a folder id.
            page_token: Token from the previous page; None for the first page.

        Returns:
            A ListingResult with entries in the order Drive returned them.

        Raises:
            AuthError: The credential was rejected. Never retried here.
            TransientNetworkError: Connectivity or server failure; safe to retry with the same page_token.
            MalformedResponseError: The response is missing expected fields.
        """
        scope = utils.validate_id(scope, "scope")

        sanitized = sanitize_for_logging(scope=scope, page_token=page_token)
        logger.info("Listing Drive entries in scope=%s, page_token=%s, page_size=%d",
                    sanitized['scope'], sanitized['page_token'], self._page_size)

        request_params = {
            'pageSize': self._page_size,
            'fields': LIST_FIELDS,
            'q': utils.build_parent_query(scope),
        }
        if page_token:
            request_params['pageToken'] = page_token

        try:
            async with async_drive_service(credential) as (aiogoogle, service):
                response = await send_authorized(aiogoogle, service.files.list(**request_params))
        except DriveFetcherError:
            raise
        except Exception as e:
            error = utils.translate_error(e, "listing entries")
            logger.error("Error listing Drive entries: %s", error)
            raise error from e

        result = utils.parse_listing(response)
        logger.info("Found %d entries (more pages: %s)", len(result), result.has_more)
        return result

    async def iter_pages(
            self,
            credential: CredentialLike,
            scope: str = ROOT_SCOPE
    ) -> AsyncIterator[ListingResult]:
        """
        Lazily yields the pages of a listing, starting from the first page.

        Pages are requested one at a time, each with the token issued by the
        previous page, and only when the consumer asks for the next one.
        """
        page_token = None
        issued_tokens = set()

        while True:
            page = await self.list_page(credential, scope, page_token)
            yield page

            if not page.has_more:
                return
            if page.next_page in issued_tokens:
                raise MalformedResponseError("Drive issued the same page token twice")
            issued_tokens.add(page.next_page)
            page_token = page.next_page

    async def accumulate_all(
            self,
            credential: CredentialLike,
            scope: str = ROOT_SCOPE
    ) -> AsyncIterator[RemoteEntry]:
        """
        Lazily yields every entry of a scope in page order.

        Each call restarts from the first page. Entries whose id was already
        yielded by this sequence are skipped.
        """
        seen_ids = set()

        async for page in self.iter_pages(credential, scope):
            for entry in page.entries:
                if entry.entry_id in seen_ids:
                    logger.debug("Skipping duplicate entry %s",
                                 sanitize_for_logging(entry_id=entry.entry_id)['entry_id'])
                    continue
                seen_ids.add(entry.entry_id)
                yield entry

    def resolve_folder(self, credential: CredentialLike, folder_id: str) -> AsyncIterator[RemoteEntry]:
        """
        Lazily yields the direct children of a folder.

        Args:
            credential: Bearer credential for the listing calls.
            folder_id: Id of the folder to resolve.
        """
        folder_id = utils.validate_id(folder_id, "folder_id")
        return self.accumulate_all(credential, folder_id)

    # Downloads
    async def download_entry(
            self,
            credential: CredentialLike,
            entry: RemoteEntry,
            sink: Optional[DownloadSink] = None,
            folder_path: Iterable[str] = ()
    ) -> DownloadedFile:
        """
        Downloads a file, or exports a Google-native document.

        Args:
            credential: Bearer credential for this call.
            entry: The file or document to download.
            sink: Optional destination the content is handed to once complete.
            folder_path: Folder names between the download root and this entry.

        Returns:
            The downloaded content and its suggested filename.

        Raises:
            ValidationError: If the entry is a folder.
            NotFoundError: The entry was deleted after it was listed.
        """
        if entry.kind is EntryKind.FOLDER:
            raise ValidationError("Folders cannot be downloaded directly; use download_folder")

        sanitized = sanitize_for_logging(entry_id=entry.entry_id, filename=entry.name)
        pipe = _BytesPipe()

        try:
            async with async_drive_service(credential) as (aiogoogle, service):
                if entry.kind is EntryKind.EXPORTABLE_DOCUMENT:
                    logger.info("Exporting document %s as %s", sanitized['entry_id'],
                                self._export_mime_type)
                    request = service.files.export(
                        fileId=entry.entry_id,
                        mimeType=self._export_mime_type,
                        pipe_to=pipe
                    )
                else:
                    logger.info("Downloading file %s %s", sanitized['entry_id'], sanitized['filename'])
                    request = service.files.get(fileId=entry.entry_id, alt="media", pipe_to=pipe)
                await send_authorized(aiogoogle, request)
        except DriveFetcherError:
            raise
        except Exception as e:
            error = utils.translate_error(e, f"downloading {sanitized['entry_id']}")
            logger.error("Error downloading Drive entry: %s", error)
            raise error from e

        if entry.kind is EntryKind.EXPORTABLE_DOCUMENT:
            filename = utils.export_filename(entry.name, self._export_mime_type)
            mime_type = self._export_mime_type
        else:
            filename = entry.name
            mime_type = entry.mime_type

        downloaded = DownloadedFile(
            entry=entry,
            filename=filename,
            content=pipe.getvalue(),
            mime_type=mime_type,
            folder_path=tuple(folder_path)
        )
        logger.info("Downloaded %d bytes", downloaded.size)

        if sink is not None:
            await sink.save(downloaded)
        return downloaded

    async def download_folder(
            self,
            credential: CredentialLike,
            folder_id: str,
            sink: Optional[DownloadSink] = None,
            cancel_event: Optional[asyncio.Event] = None,
            on_progress: Optional[ProgressCallback] = None
    ) -> FolderDownloadResult:
        """
        Downloads every file below a folder, depth-first in listing order.

        Children are processed one at a time. A failure to download a file or
        to list a nested folder is recorded and its siblings continue; a
        failure to list the requested folder itself, or any AuthError, ends
        the operation with an exception.

        Args:
            credential: Bearer credential for every call of the operation.
            folder_id: Id of the folder to download.
            sink: Destination for the downloaded files.
            cancel_event: When set, the operation stops before the next child.
            on_progress: Called with each DownloadedFile or DownloadFailure.

        Returns:
            The number of files downloaded and the failures recorded.
        """
        folder_id = utils.validate_id(folder_id, "folder_id")
        logger.info("Downloading folder %s", sanitize_for_logging(folder_id=folder_id)['folder_id'])

        result = FolderDownloadResult()
        visited = {folder_id}
        stack: List[_PendingFolder] = [
            _PendingFolder(children=self.resolve_folder(credential, folder_id), path=())
        ]

        try:
            while stack:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("Folder download cancelled after %d files", result.count)
                    result.cancelled = True
                    break

                frame = stack[-1]
                try:
                    child = await anext(frame.children)
                except StopAsyncIteration:
                    stack.pop()
                    continue
                except AuthError:
                    raise
                except APIError as e:
                    if frame.entry is None:
                        raise
                    self._record_failure(result, frame.entry, e, on_progress)
                    stack.pop()
                    continue

                if child.is_folder:
                    if child.entry_id in visited:
                        logger.debug("Skipping already visited folder %s",
                                     sanitize_for_logging(folder_id=child.entry_id)['folder_id'])
                        continue
                    visited.add(child.entry_id)
                    stack.append(_PendingFolder(
                        children=self.resolve_folder(credential, child.entry_id),
                        path=frame.path + (child.name,),
                        entry=child
                    ))
                    continue

                try:
                    downloaded = await self.download_entry(credential, child, sink, frame.path)
                except AuthError:
                    raise
                except (APIError, OSError, ValueError) as e:
                    self._record_failure(result, child, e, on_progress)
                    continue

                result.count += 1
                if on_progress is not None:
                    on_progress(downloaded)
        finally:
            for frame in stack:
                await frame.children.aclose()

        logger.info("Folder download finished: %s", result)
        return result

    async def download_selection(
            self,
            credential: CredentialLike,
            entry: RemoteEntry,
            sink: Optional[DownloadSink] = None,
            cancel_event: Optional[asyncio.Event] = None,
            on_progress: Optional[ProgressCallback] = None
    ) -> FolderDownloadResult:
        """
        Downloads whatever entry the user picked: a folder recursively, anything else directly.

        Errors from a single-file download propagate; folder downloads follow
        the download_folder failure rules.
        """
        if entry.is_folder:
            return await self.download_folder(credential, entry.entry_id, sink,
                                              cancel_event, on_progress)

        downloaded = await self.download_entry(credential, entry, sink)
        if on_progress is not None:
            on_progress(downloaded)
        return FolderDownloadResult(count=1)

    @staticmethod
    def _record_failure(
            result: FolderDownloadResult,
            entry: RemoteEntry,
            error: Exception,
            on_progress: Optional[ProgressCallback]
    ) -> None:
        sanitized = sanitize_for_logging(entry_id=entry.entry_id)
        logger.warning("Skipping %s after failure: %s", sanitized['entry_id'], error)
        failure = DownloadFailure(entry=entry, error=error)
        result.failures.append(failure)
        if on_progress is not None:
            on_progress(failure)
