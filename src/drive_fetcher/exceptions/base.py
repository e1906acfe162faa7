class DriveFetcherError(Exception):
    """Base exception for all drive fetcher errors."""
    pass


class AuthError(DriveFetcherError):
    """Raised when the bearer credential is rejected, missing scope, or expired."""
    pass


class APIError(DriveFetcherError):
    """Raised when a remote Drive call fails."""
    pass


class ValidationError(DriveFetcherError):
    """Raised when input validation fails."""
    pass
