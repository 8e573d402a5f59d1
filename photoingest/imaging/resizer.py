"""Bounded-size JPEG re-encoding of uploaded photos."""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Tuple

from PIL import Image, ImageOps

from photoingest.imaging.exceptions import DecodeError

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "JPEG"
OUTPUT_CONTENT_TYPE = "image/jpeg"
OUTPUT_EXTENSION = "jpg"
DEFAULT_QUALITY = 85


@dataclass
class ResizerResult:
    """A re-encoded derivative ready to be written to blob storage.

    Attributes:
        stream: Encoded image bytes, positioned at the start
        size: Exact byte length of the encoded image
        width: Width of the encoded image in pixels
        height: Height of the encoded image in pixels
    """
    stream: BinaryIO
    size: int
    width: int
    height: int


def scaled_dimensions(width: int, height: int, size: int) -> Tuple[int, int]:
    """Compute dimensions bounded by ``size`` on the longer edge.

    Images already within the bound keep their dimensions (no upscaling).

    Examples:
        >>> scaled_dimensions(4000, 3000, 1080)
        (1080, 810)
        >>> scaled_dimensions(200, 100, 300)
        (200, 100)
    """
    longer = max(width, height)
    if longer <= size:
        return width, height

    ratio = size / float(longer)
    if width >= height:
        return size, max(1, round(height * ratio))
    return max(1, round(width * ratio)), size


class ImageResizer:
    """Decodes an image stream and re-encodes it within a bounding size.

    The longer edge is scaled down to ``size`` preserving the aspect ratio,
    the result is encoded as JPEG with fixed parameters so equal input always
    yields equal output.

    Attributes:
        stream: Source image stream (consumed by :meth:`resize`)
        size: Target size in pixels for the longer edge
        quality: JPEG quality used for encoding
    """

    def __init__(self, stream: BinaryIO, size: int, quality: int = DEFAULT_QUALITY) -> None:
        """Initialize resizer.

        Args:
            stream: Readable binary image stream
            size: Target longer-edge size in pixels
            quality: JPEG quality (1-95)

        Raises:
            ValueError: If size is not a positive integer
        """
        if size <= 0:
            raise ValueError(f"Target size must be positive, got {size}")
        self.stream = stream
        self.size = size
        self.quality = quality

    def resize(self) -> ResizerResult:
        """Decode, scale and re-encode the image.

        Returns:
            ResizerResult with the encoded stream and its exact size

        Raises:
            DecodeError: If the stream is not a decodable image
        """
        try:
            with Image.open(self.stream) as img:
                img.load()
                image = ImageOps.exif_transpose(img)
                if image.mode != "RGB":
                    image = image.convert("RGB")

                original = image.size
                target = scaled_dimensions(image.width, image.height, self.size)
                if target != original:
                    image = image.resize(target, Image.LANCZOS)

                out = io.BytesIO()
                image.save(out, format=OUTPUT_FORMAT, quality=self.quality, optimize=True)
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot decode image: {e}") from e

        size = out.getbuffer().nbytes
        out.seek(0)

        logger.debug(
            f"Resized {original[0]}x{original[1]} -> {target[0]}x{target[1]} "
            f"(bound {self.size}px, {size} bytes)"
        )
        return ResizerResult(stream=out, size=size, width=target[0], height=target[1])
