"""EXIF capture metadata extraction for uploaded photos."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Optional

from PIL import Image

logger = logging.getLogger(__name__)

# EXIF tag identifiers
EXIF_IFD = 0x8769
TAG_MAKE = 271
TAG_MODEL = 272
TAG_DATETIME_ORIGINAL = 36867
TAG_OFFSET_TIME_ORIGINAL = 36881

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


@dataclass(frozen=True)
class ImageMetadata:
    """Capture metadata embedded in an image.

    Every field may be absent; absence is an expected state.

    Attributes:
        photo_taken: Capture instant (timezone-aware, UTC)
        made_by: Camera manufacturer
        model: Camera model
    """
    photo_taken: Optional[datetime] = None
    made_by: Optional[str] = None
    model: Optional[str] = None

    @property
    def has_photo_taken(self) -> bool:
        """Check if the capture time is known."""
        return self.photo_taken is not None


def _clean_text(value) -> Optional[str]:
    """Normalize an EXIF ASCII value, returning None for empty values."""
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).replace("\x00", "").strip()
    return text or None


def parse_exif_datetime(value, offset=None) -> Optional[datetime]:
    """Parse an EXIF ``YYYY:MM:DD HH:MM:SS`` value into a UTC datetime.

    The value is taken as UTC unless a parsable ``OffsetTimeOriginal`` style
    offset (e.g. ``+02:00``) accompanies it. An offset that cannot be parsed
    is ignored rather than discarding the capture time.

    Args:
        value: Raw DateTimeOriginal value
        offset: Raw OffsetTimeOriginal value (optional)

    Returns:
        Aware datetime in UTC, or None if the value cannot be parsed
    """
    text = _clean_text(value)
    if not text:
        return None

    try:
        parsed = datetime.strptime(text, EXIF_DATETIME_FORMAT)
    except ValueError:
        logger.debug(f"Unparsable EXIF date/time: {text!r}")
        return None

    offset_text = _clean_text(offset)
    if offset_text:
        try:
            tzinfo = datetime.strptime(offset_text, "%z").tzinfo
        except ValueError:
            # Placeholders such as "   :  " leave the capture time as UTC
            logger.debug(f"Ignoring unparsable EXIF offset {offset_text!r} for {text!r}")
        else:
            return parsed.replace(tzinfo=tzinfo).astimezone(timezone.utc)

    return parsed.replace(tzinfo=timezone.utc)


class MetadataExplorer:
    """Extracts capture time and camera attributes from raw image bytes.

    Missing or corrupt metadata is a normal outcome: :meth:`explore` returns
    None instead of raising.
    """

    def explore(self, stream: BinaryIO) -> Optional[ImageMetadata]:
        """Parse embedded EXIF metadata from an image stream.

        The stream is consumed; pass a freshly positioned stream per call.

        Args:
            stream: Readable binary image stream

        Returns:
            ImageMetadata (with ``photo_taken`` None when the tag is absent),
            or None when no metadata could be extracted at all
        """
        try:
            with Image.open(stream) as img:
                exif = img.getexif()
                if exif is None or len(exif) == 0:
                    logger.debug("No EXIF data found in image")
                    return None

                exif_ifd = exif.get_ifd(EXIF_IFD)

                # Some writers put DateTimeOriginal in IFD0 instead of the Exif IFD
                raw_taken = exif_ifd.get(TAG_DATETIME_ORIGINAL) or exif.get(TAG_DATETIME_ORIGINAL)
                raw_offset = exif_ifd.get(TAG_OFFSET_TIME_ORIGINAL) or exif.get(TAG_OFFSET_TIME_ORIGINAL)

                metadata = ImageMetadata(
                    photo_taken=parse_exif_datetime(raw_taken, raw_offset),
                    made_by=_clean_text(exif.get(TAG_MAKE)),
                    model=_clean_text(exif.get(TAG_MODEL)),
                )
        except Exception as e:
            logger.debug(f"Could not extract image metadata: {e}")
            return None

        logger.debug(
            f"Extracted metadata: taken={metadata.photo_taken}, "
            f"make={metadata.made_by}, model={metadata.model}"
        )
        return metadata
