"""Custom exceptions for storage collaborators and inbound events."""


class StorageError(Exception):
    """Base exception for storage-related errors.

    Attributes:
        message: Error message
        key: Object key or record key involved (if any)
        error_code: Service error code (if provided by the service)
    """

    def __init__(self, message: str, key: str = None, error_code: str = None):
        """Initialize storage error.

        Args:
            message: Error message
            key: Object key or record key involved
            error_code: Service error code (e.g. ``AccessDenied``)
        """
        super().__init__(message)
        self.message = message
        self.key = key
        self.error_code = error_code

    def __str__(self) -> str:
        """Return string representation of error."""
        if self.error_code:
            return f"{self.message} ({self.error_code})"
        return self.message


class StorageReadError(StorageError):
    """Exception raised when an uploaded original cannot be read."""
    pass


class StorageWriteError(StorageError):
    """Exception raised when a derivative or metadata record cannot be written."""
    pass


class InvalidEventError(StorageError):
    """Exception raised for a notification record missing required fields."""
    pass
