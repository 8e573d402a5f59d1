"""Destination key derivation for photo derivatives."""

import uuid
from datetime import datetime
from typing import Tuple

KEY_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"
THUMBNAILS_SEGMENT = "thumbnails/"


def _millis_of_day(moment: datetime) -> int:
    return (
        (moment.hour * 3600 + moment.minute * 60 + moment.second) * 1000
        + moment.microsecond // 1000
    )


def create_dest_key(moment: datetime, ext: str) -> str:
    """Create a sortable, collision-resistant key for a photo.

    The key is ``<YYYY-MM-DD-HH-MM-SS>-<millis of day, 8 digits>-<8 hex>.<ext>``; the
    hex suffix comes from a fresh random UUID so two photos taken in the same
    second still get distinct keys.

    Examples:
        >>> create_dest_key(datetime(2020, 1, 1, 10), "jpg")  # doctest: +SKIP
        '2020-01-01-10-00-00-36000000-9f1c2ab4.jpg'
    """
    suffix = uuid.uuid4().hex[:8]
    return f"{moment.strftime(KEY_TIMESTAMP_FORMAT)}-{_millis_of_day(moment):08d}-{suffix}.{ext}"


def compose_keys(user_id: str, base_key: str, key_prefix: str = "photos/") -> Tuple[str, str]:
    """Return ``(photo_key, thumbnail_key)`` for a user's base key.

    Both keys share ``base_key`` and differ only by the thumbnails segment.
    """
    user_prefix = f"{key_prefix}{user_id}/"
    return user_prefix + base_key, user_prefix + THUMBNAILS_SEGMENT + base_key
