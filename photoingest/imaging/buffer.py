"""Materialize-once, read-many buffer for uploaded photo bytes."""

import io
from typing import BinaryIO


class CachedPhotoBytes:
    """Owns the raw bytes of one upload and hands out fresh read cursors.

    Metadata extraction and each resize pass consume their stream fully, so
    every consumer gets its own cursor via :meth:`open`. Reading from one
    cursor never moves another.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "CachedPhotoBytes":
        """Read ``stream`` to the end once and cache its content."""
        return cls(stream.read())

    def open(self) -> io.BytesIO:
        """Return a new cursor positioned at the start of the bytes."""
        return io.BytesIO(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"<CachedPhotoBytes {len(self._data)} bytes>"
