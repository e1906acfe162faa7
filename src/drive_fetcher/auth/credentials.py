"""
Credential handling for the drive fetcher.

The fetcher never obtains or refreshes tokens. The caller passes a bearer
token on every call, either as a plain string or as a google-auth
credentials object that already carries a valid token.
"""

import logging
from contextlib import asynccontextmanager
from typing import Union

from aiogoogle import Aiogoogle
from aiogoogle.auth.creds import UserCreds
from google.auth.credentials import Credentials

from ..exceptions import AuthError, ValidationError
from ..utils.log_sanitizer import sanitize_token

logger = logging.getLogger(__name__)

CredentialLike = Union[str, Credentials]


def resolve_bearer_token(credential: CredentialLike) -> str:
    """
    Extract the bearer token from a caller-supplied credential.

    Args:
        credential: A bearer token string or a google-auth Credentials object.

    Returns:
        The bearer token string.

    Raises:
        ValidationError: If no token was supplied.
        AuthError: If a Credentials object is expired or holds no token.
    """
    if isinstance(credential, Credentials):
        if credential.expired or not credential.token:
            # Renewal belongs to the caller's auth flow
            raise AuthError("Credentials are expired or missing an access token")
        return credential.token

    if not isinstance(credential, str) or not credential.strip():
        raise ValidationError("A non-empty bearer credential is required")
    return credential.strip()


def to_user_creds(credential: CredentialLike) -> UserCreds:
    """
    Build aiogoogle UserCreds holding only the access token.

    No refresh token or client credentials are attached. Requests are sent
    through send_authorized, which never asks aiogoogle to renew the token.
    """
    token = resolve_bearer_token(credential)
    logger.debug("Using bearer credential %s", sanitize_token(token))
    return UserCreds(access_token=token)


@asynccontextmanager
async def async_drive_service(credential: CredentialLike):
    """
    Async context manager for a Drive v3 service bound to one credential.

    Yields:
        Tuple of (aiogoogle instance, drive service)
    """
    user_creds = to_user_creds(credential)

    async with Aiogoogle(user_creds=user_creds) as aiogoogle:
        drive_service = await aiogoogle.discover("drive", "v3")
        yield aiogoogle, drive_service


async def send_authorized(aiogoogle: Aiogoogle, request):
    """
    Send a request with the session's bearer token attached as-is.

    Aiogoogle.as_user refreshes the user credentials before every request,
    which fails without client credentials and would otherwise renew the
    token. Only the Authorization header is added here; a rejected token
    comes back as a 401.

    Args:
        aiogoogle: Open session yielded by async_drive_service
        request: aiogoogle Request built from the discovered service

    Returns:
        The response content, as Aiogoogle.send returns it
    """
    authorized_request = aiogoogle.oauth2.authorize(request, aiogoogle.user_creds)
    return await aiogoogle.send(authorized_request)
