"""Custom exception hierarchy."""


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass


class ApplicationNotFoundError(AppError):
    """Raised when a loan application does not exist."""
    pass


class SourceUnavailableError(AppError):
    """Raised when a field source cannot be read.

    The value collector absorbs this per source; it only escapes when a
    caller reads a source directly.
    """

    def __init__(self, message: str, source_type: str, original_error: Exception = None):
        super().__init__(message, original_error)
        self.source_type = source_type
