"""Image metadata extraction and resizing for photoIngest."""

from photoingest.imaging.buffer import CachedPhotoBytes
from photoingest.imaging.metadata import ImageMetadata, MetadataExplorer
from photoingest.imaging.resizer import ImageResizer, ResizerResult
from photoingest.imaging.exceptions import DecodeError, ImagingError

__all__ = [
    "CachedPhotoBytes",
    "ImageMetadata",
    "MetadataExplorer",
    "ImageResizer",
    "ResizerResult",
    "DecodeError",
    "ImagingError",
]
