"""photoIngest - upload-to-derivative pipeline for photo uploads.

Turns object-created notifications for uploaded photos into a web-size and a
thumbnail-size JPEG derivative plus a metadata record keyed by user and a
capture-time based key.
"""

from photoingest._version import __version__, __version_info__
from photoingest.config import ConfigManager
from photoingest.processing import PhotoProcessor

__license__ = "MIT"
__all__ = [
    "__version__",
    "__version_info__",
    "ConfigManager",
    "PhotoProcessor",
]
