"""Processing module for orchestrating the upload-to-derivative pipeline."""

from .processor import PhotoProcessor, ProcessingResult, BatchProcessingStats
from .keys import create_dest_key, compose_keys
from .exceptions import (
    ProcessingError,
    PhotoProcessingError,
    PipelineTimeoutError,
    BatchProcessingError,
)

__all__ = [
    "PhotoProcessor",
    "ProcessingResult",
    "BatchProcessingStats",
    "create_dest_key",
    "compose_keys",
    "ProcessingError",
    "PhotoProcessingError",
    "PipelineTimeoutError",
    "BatchProcessingError",
]
