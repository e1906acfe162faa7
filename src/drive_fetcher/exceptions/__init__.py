from .base import DriveFetcherError, AuthError, APIError, ValidationError
from .drive import (
    TransientNetworkError, NotFoundError, MalformedResponseError, PermissionDeniedError
)

__all__ = [
    "DriveFetcherError",
    "AuthError",
    "APIError",
    "ValidationError",
    "TransientNetworkError",
    "NotFoundError",
    "MalformedResponseError",
    "PermissionDeniedError",
]
