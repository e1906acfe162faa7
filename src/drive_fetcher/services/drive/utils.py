import asyncio
from typing import Optional, Any, Set

import aiohttp
from aiogoogle.excs import HTTPError

from .types import RemoteEntry, ListingResult, EntryKind
from .constants import (
    FOLDER_MIME_TYPE, GOOGLE_APPS_MIME_PREFIX, EXPORT_EXTENSIONS,
    STATUS_UNAUTHORIZED, STATUS_FORBIDDEN, STATUS_NOT_FOUND,
    STATUS_TOO_MANY_REQUESTS, RATE_LIMIT_REASONS, CREDENTIAL_REASONS
)
from ...exceptions import (
    DriveFetcherError, AuthError, APIError, ValidationError,
    TransientNetworkError, NotFoundError, MalformedResponseError, PermissionDeniedError
)


def classify_kind(mime_type: Optional[str]) -> EntryKind:
    """Maps a Drive MIME type to the kind of entry it denotes."""
    if mime_type == FOLDER_MIME_TYPE:
        return EntryKind.FOLDER
    if mime_type and mime_type.startswith(GOOGLE_APPS_MIME_PREFIX):
        return EntryKind.EXPORTABLE_DOCUMENT
    return EntryKind.FILE


def parse_size(value: Any, entry_id: str) -> Optional[int]:
    """
    Parse the size field of a Drive file resource.

    Drive serializes int64 values as strings.

    Args:
        value: Raw size value from the API response
        entry_id: Id of the entry, used in the error message

    Returns:
        Size in bytes, or None if the remote did not report one
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise MalformedResponseError(f"Invalid size for entry {entry_id}: {value!r}")
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise MalformedResponseError(f"Invalid size for entry {entry_id}: {value!r}")
    if size < 0:
        raise MalformedResponseError(f"Negative size for entry {entry_id}: {size}")
    return size


def from_google_file(file_data: Any) -> RemoteEntry:
    """
    Creates a RemoteEntry from a Drive file resource.

    Args:
        file_data: A dictionary from the 'files' array of a files.list response.

    Returns:
        A RemoteEntry instance.

    Raises:
        MalformedResponseError: If the id or name is missing or the size is invalid.
    """
    if not isinstance(file_data, dict):
        raise MalformedResponseError(f"Expected a file object, got {type(file_data).__name__}")

    entry_id = file_data.get('id')
    name = file_data.get('name')
    if not entry_id or not isinstance(entry_id, str):
        raise MalformedResponseError("File resource is missing 'id'")
    if name is None or not isinstance(name, str):
        raise MalformedResponseError(f"File resource {entry_id} is missing 'name'")

    mime_type = file_data.get('mimeType')
    kind = classify_kind(mime_type)
    size_bytes = None if kind is EntryKind.FOLDER else parse_size(file_data.get('size'), entry_id)

    return RemoteEntry(
        entry_id=entry_id,
        name=name,
        kind=kind,
        mime_type=mime_type,
        size_bytes=size_bytes
    )


def parse_listing(response: Any) -> ListingResult:
    """
    Parse a files.list response into a ListingResult.

    A missing 'files' key is an empty page; a 'files' value that is not a
    list, or a response that is not an object, is malformed.
    """
    if not isinstance(response, dict):
        raise MalformedResponseError(
            f"Expected a JSON object from files.list, got {type(response).__name__}"
        )

    files = response.get('files', [])
    if not isinstance(files, list):
        raise MalformedResponseError("'files' in files.list response is not a list")

    next_page = response.get('nextPageToken') or None
    if next_page is not None and not isinstance(next_page, str):
        raise MalformedResponseError("'nextPageToken' in files.list response is not a string")

    entries = tuple(from_google_file(file_data) for file_data in files)
    return ListingResult(entries=entries, next_page=next_page)


def validate_id(value: Optional[str], field_name: str) -> str:
    """Validates that a Drive id or scope is a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    return value.strip()


def escape_query_value(value: str) -> str:
    """Escapes a value for use inside a single-quoted Drive query string."""
    return value.replace('\\', '\\\\').replace("'", "\\'")


def build_parent_query(scope: str) -> str:
    """Builds the Drive 'q' filter selecting the direct children of scope."""
    return f"'{escape_query_value(scope)}' in parents"


def export_filename(name: str, export_mime_type: str) -> str:
    """
    Suggested filename for an exported document.

    Appends the export format's extension unless the name already ends with it.
    """
    extension = EXPORT_EXTENSIONS.get(export_mime_type)
    if not extension or name.lower().endswith(extension):
        return name
    return f"{name}{extension}"


def _error_reasons(res: Any) -> Set[str]:
    """Collects the 'reason' values from a Google JSON error body."""
    content = getattr(res, 'content', None)
    if not isinstance(content, dict):
        return set()
    error = content.get('error')
    if not isinstance(error, dict):
        return set()

    reasons = set()
    for item in error.get('errors', []) or []:
        if isinstance(item, dict) and item.get('reason'):
            reasons.add(item['reason'])
    return reasons


def translate_error(error: Exception, operation: str) -> DriveFetcherError:
    """
    Map a transport or HTTP error onto the fetcher's error taxonomy.

    Args:
        error: The exception raised by aiogoogle or aiohttp
        operation: Short description of the failed call, used in the message

    Returns:
        The exception to raise in its place
    """
    if isinstance(error, DriveFetcherError):
        return error

    if isinstance(error, HTTPError):
        res = getattr(error, 'res', None)
        status = getattr(res, 'status_code', None)

        if status == STATUS_UNAUTHORIZED:
            return AuthError(f"Credential rejected while {operation}: {error}")
        if status == STATUS_FORBIDDEN:
            reasons = _error_reasons(res)
            if reasons & RATE_LIMIT_REASONS:
                return TransientNetworkError(f"Rate limited while {operation}: {error}")
            if not reasons or reasons & CREDENTIAL_REASONS:
                return AuthError(f"Credential lacks access while {operation}: {error}")
            return PermissionDeniedError(f"Permission denied while {operation}: {error}")
        if status == STATUS_NOT_FOUND:
            return NotFoundError(f"Not found while {operation}: {error}")
        if status == STATUS_TOO_MANY_REQUESTS or (isinstance(status, int) and status >= 500):
            return TransientNetworkError(f"Drive server error while {operation}: {error}")
        return APIError(f"Drive API error while {operation}: {error}")

    if isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError)):
        return TransientNetworkError(f"Network error while {operation}: {error}")

    return APIError(f"Unexpected error while {operation}: {error}")
