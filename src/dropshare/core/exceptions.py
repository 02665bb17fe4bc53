"""Custom exceptions for DropShare."""


class DropShareError(Exception):
    """Base exception for DropShare."""
    pass


class ValidationError(DropShareError):
    """Exception raised when a file or argument is rejected."""
    pass


class CompressionError(DropShareError):
    """Exception raised when re-encoding a file fails."""
    pass


class UploadError(DropShareError):
    """Exception raised when a simulated transfer fails."""
    pass


class NotFoundError(DropShareError):
    """Exception raised when a record, link or entry does not exist."""
    pass


class ExpiredError(DropShareError):
    """Exception raised when a share link is past its expiry."""
    pass


class InvalidTransitionError(DropShareError):
    """Exception raised when an entry cannot move to the requested status."""
    pass
