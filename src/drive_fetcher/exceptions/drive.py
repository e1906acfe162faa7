from .base import APIError


class TransientNetworkError(APIError):
    """Raised on connectivity failures, timeouts, rate limiting and 5xx responses."""
    pass


class NotFoundError(APIError):
    """Raised when a file or folder no longer exists."""
    pass


class MalformedResponseError(APIError):
    """Raised when a Drive response is missing expected fields."""
    pass


class PermissionDeniedError(APIError):
    """Raised when the credential is valid but may not access one specific file."""
    pass
