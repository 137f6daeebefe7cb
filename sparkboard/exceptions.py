"""Custom exception classes for Sparkboard."""


class SparkboardError(Exception):
    """Base exception for Sparkboard errors."""
    pass


class AuthenticationError(SparkboardError):
    """Raised when login or session refresh is rejected."""
    pass


class NotAuthenticatedError(SparkboardError):
    """Raised when an authoring operation is attempted without a signed-in user."""
    pass


class RemoteError(SparkboardError):
    """Raised when the hosted backend fails a read, write or upload."""
    pass


class APIError(RemoteError):
    """Raised when the backend returns an error response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(RemoteError):
    """Raised when network requests fail."""
    pass


class UnknownKindError(SparkboardError):
    """Raised when a spark's kind-tag is not one we know how to interpret."""
    pass


class UnsupportedForSharingError(UnknownKindError):
    """Raised when a spark cannot be projected into a community attachment."""
    pass


class CompensationError(SparkboardError):
    """
    Raised when the rollback of a partially applied multi-step write fails.

    The remote state is inconsistent when this is raised: ``post_id`` names the
    community post that could not be removed.
    """

    def __init__(self, message: str, post_id: str | None = None):
        super().__init__(message)
        self.post_id = post_id


class ConfigurationError(SparkboardError):
    """Raised when required configuration is missing."""
    pass


class ValidationError(SparkboardError):
    """Raised when input validation fails."""
    pass
