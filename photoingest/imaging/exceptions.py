"""Custom exceptions for image decoding and resizing."""


class ImagingError(Exception):
    """Base exception for imaging errors."""
    pass


class DecodeError(ImagingError):
    """Raised when an image stream cannot be decoded or re-encoded."""
    pass
