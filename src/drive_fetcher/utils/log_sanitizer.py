"""
Log sanitization utilities to keep credentials and user data out of logs.

Drive file names and ids can reveal what a user stores, and bearer tokens
grant access to the whole account. Everything that reaches a log record
passes through one of these helpers first.
"""

from typing import Optional, Sequence


def sanitize_token(token: Optional[str]) -> str:
    """
    Sanitize a bearer token for logging. The token itself is never shown.

    Args:
        token: Bearer token to sanitize

    Returns:
        Sanitized token representation

    Example:
        "ya29.a0AfH6SM..." -> "[token] (183 chars)"
    """
    if not token:
        return "[no-token]"
    return f"[token] ({len(token)} chars)"


def sanitize_file_id(file_id: Optional[str]) -> str:
    """
    Sanitize a Drive file or folder id for logging.

    Args:
        file_id: Drive id to sanitize

    Returns:
        Sanitized id representation
    """
    if not file_id:
        return "[no-id]"

    # Show only first 6 and last 4 characters
    if len(file_id) <= 10:
        return f"[id: {file_id}]"
    return f"[id: {file_id[:6]}...{file_id[-4:]}]"


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Sanitize filename for logging.

    Args:
        filename: Filename to sanitize

    Returns:
        Sanitized filename representation
    """
    if not filename:
        return "[no-filename]"

    # Show only extension and length for privacy
    parts = filename.split('.')
    if len(parts) > 1:
        extension = parts[-1].lower()
        return f"[file.{extension}] ({len(filename)} chars)"
    else:
        return f"[file] ({len(filename)} chars)"


def sanitize_folder_path(folder_path: Sequence[str]) -> str:
    """
    Sanitize a chain of folder names, keeping only its depth.

    Args:
        folder_path: Folder names from the download root downwards

    Returns:
        Sanitized folder path representation
    """
    if not folder_path:
        return "[root]"
    return f"[depth {len(folder_path)}]"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (credential, file_id, filename, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in ('credential', 'token', 'access_token'):
            sanitized[key] = sanitize_token(value)
        elif key in ('file_id', 'folder_id', 'scope', 'entry_id'):
            sanitized[key] = sanitize_file_id(value)
        elif key in ('filename', 'name'):
            sanitized[key] = sanitize_filename(value)
        elif key == 'page_token':
            sanitized[key] = "[page-token]" if value else None
        elif key == 'folder_path':
            sanitized[key] = sanitize_folder_path(value or ())
        else:
            # For other fields, just include as-is (non-PII data)
            sanitized[key] = value

    return sanitized
