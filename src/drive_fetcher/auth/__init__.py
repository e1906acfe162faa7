"""Bearer credential handling."""

from .credentials import async_drive_service, resolve_bearer_token, send_authorized, to_user_creds

__all__ = [
    "async_drive_service",
    "resolve_bearer_token",
    "send_authorized",
    "to_user_creds",
]
