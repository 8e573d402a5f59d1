"""Custom exceptions for the upload-to-derivative pipeline."""


class ProcessingError(Exception):
    """Base exception for pipeline errors."""
    pass


class PhotoProcessingError(ProcessingError):
    """Raised when processing of one uploaded photo fails.

    Wraps whatever stopped the pipeline (decode, read or write failure) and
    identifies the uploaded object it belongs to.

    Attributes:
        source_key: Key of the uploaded original
        cause: Underlying exception (if any)
    """

    def __init__(self, source_key: str, cause: Exception = None, message: str = None):
        """Initialize processing error.

        Args:
            source_key: Key of the uploaded original
            cause: Underlying exception
            message: Explicit message (derived from cause if not given)
        """
        self.source_key = source_key
        self.cause = cause
        self.message = message or (f"{type(cause).__name__}: {cause}" if cause else "Processing failed")
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of error."""
        return f"Failed to process {self.source_key}: {self.message}"


class PipelineTimeoutError(PhotoProcessingError):
    """Raised when one photo's pipeline exceeds its deadline."""
    pass


class BatchProcessingError(ProcessingError):
    """Raised after a batch completed with at least one failed record.

    Attributes:
        stats: BatchProcessingStats of the completed batch
    """

    def __init__(self, message: str, stats=None):
        super().__init__(message)
        self.stats = stats
