"""Tests for destination key derivation."""

import re
from datetime import datetime, timezone

from photoingest.processing.keys import compose_keys, create_dest_key

KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}-\d{8}-[0-9a-f]{8}\.jpg$")


def test_key_matches_format():
    key = create_dest_key(datetime(2021, 7, 4, 18, 30, 5, tzinfo=timezone.utc), "jpg")

    assert KEY_PATTERN.match(key)
    assert key.startswith("2021-07-04-18-30-05-")


def test_millis_of_day_discriminator():
    moment = datetime(2020, 1, 1, 10, 0, 0, 250000, tzinfo=timezone.utc)

    assert create_dest_key(moment, "jpg").startswith("2020-01-01-10-00-00-36000250-")


def test_same_timestamp_gets_distinct_suffixes():
    moment = datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    keys = {create_dest_key(moment, "jpg") for _ in range(50)}

    assert len(keys) == 50


def test_keys_sort_chronologically():
    earlier = create_dest_key(datetime(2019, 12, 31, 23, 59, 59), "jpg")
    later = create_dest_key(datetime(2020, 1, 1, 0, 0, 0), "jpg")

    assert earlier < later


def test_extension_is_kept():
    assert create_dest_key(datetime(2020, 1, 1), "png").endswith(".png")


def test_compose_keys_differ_only_by_thumbnail_segment():
    photo_key, thumbnail_key = compose_keys("u1", "2020-01-01-10-00-00-36000000-abcdef01.jpg")

    assert photo_key == "photos/u1/2020-01-01-10-00-00-36000000-abcdef01.jpg"
    assert thumbnail_key == "photos/u1/thumbnails/2020-01-01-10-00-00-36000000-abcdef01.jpg"


def test_compose_keys_custom_prefix():
    photo_key, thumbnail_key = compose_keys("alice", "k.jpg", key_prefix="media/")

    assert photo_key == "media/alice/k.jpg"
    assert thumbnail_key == "media/alice/thumbnails/k.jpg"
