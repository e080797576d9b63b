"""Custom exception classes for the SchoolHub API.

Managers raise these; routes translate them into HTTP status codes.
"""


class SchoolHubError(Exception):
    """Base exception for all SchoolHub errors."""

    pass


class NotFoundError(SchoolHubError):
    """Raised when a record is missing or not owned by the caller."""

    def __init__(self, resource: str, resource_id: str = ""):
        """Initialize the exception.

        Args:
            resource: Human readable resource name, e.g. "Course".
            resource_id: The ID that was looked up.
        """
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class DuplicateError(SchoolHubError):
    """Raised when a unique value (email, school name, ...) is already taken."""

    pass


class PermissionDeniedError(SchoolHubError):
    """Raised when the caller may see a record but not act on it."""

    pass


class InvalidTokenError(SchoolHubError):
    """Raised when a verification or reset token is unknown or expired."""

    pass


class ValidationError(SchoolHubError):
    """Raised when data validation fails outside of request schemas."""

    pass


class RateLimitExceededError(SchoolHubError):
    """Raised when a client exceeds a fixed-window request ceiling."""

    def __init__(self, retry_after: int):
        """Initialize the exception.

        Args:
            retry_after: Seconds until the current window resets.
        """
        self.retry_after = retry_after
        super().__init__("Too many requests. Please try again later.")
