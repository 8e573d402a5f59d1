"""Tests for EXIF capture metadata extraction."""

import io
from datetime import datetime, timezone

from photoingest.imaging.metadata import MetadataExplorer, parse_exif_datetime

from conftest import make_camera_exif, make_exif, make_jpeg, make_png


def test_full_metadata(full_exif_jpeg):
    metadata = MetadataExplorer().explore(io.BytesIO(full_exif_jpeg))

    assert metadata is not None
    assert metadata.photo_taken == datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    assert metadata.has_photo_taken
    assert metadata.made_by == "Canon"
    assert metadata.model == "EOS R5"


def test_metadata_without_capture_time(no_date_jpeg):
    metadata = MetadataExplorer().explore(io.BytesIO(no_date_jpeg))

    assert metadata is not None
    assert metadata.photo_taken is None
    assert not metadata.has_photo_taken
    assert metadata.made_by == "NIKON CORPORATION"
    assert metadata.model == "Z 6"


def test_no_exif_segment_returns_none(plain_jpeg):
    assert MetadataExplorer().explore(io.BytesIO(plain_jpeg)) is None


def test_png_without_metadata_returns_none():
    assert MetadataExplorer().explore(io.BytesIO(make_png())) is None


def test_corrupt_stream_returns_none(corrupt_bytes):
    assert MetadataExplorer().explore(io.BytesIO(corrupt_bytes)) is None


def test_truncated_stream_does_not_raise(full_exif_jpeg):
    truncated = full_exif_jpeg[:20]

    assert MetadataExplorer().explore(io.BytesIO(truncated)) is None


def test_empty_stream_returns_none():
    assert MetadataExplorer().explore(io.BytesIO(b"")) is None


def test_unparsable_capture_time_keeps_camera_fields():
    data = make_jpeg(exif=make_exif(taken="not a date", make="Canon"))

    metadata = MetadataExplorer().explore(io.BytesIO(data))

    assert metadata is not None
    assert metadata.photo_taken is None
    assert metadata.made_by == "Canon"
    assert metadata.model is None


def test_blank_camera_fields_are_absent():
    data = make_jpeg(exif=make_exif(taken="2021:03:04 05:06:07", make="   "))

    metadata = MetadataExplorer().explore(io.BytesIO(data))

    assert metadata.photo_taken == datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    assert metadata.made_by is None
    assert metadata.model is None


def test_offset_converts_to_utc():
    data = make_jpeg(exif=make_exif(taken="2020:01:01 12:00:00", offset="+02:00"))

    metadata = MetadataExplorer().explore(io.BytesIO(data))

    assert metadata.photo_taken == datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def test_blank_offset_keeps_capture_time():
    data = make_jpeg(exif=make_exif(taken="2020:01:01 10:00:00", offset="   :  "))

    metadata = MetadataExplorer().explore(io.BytesIO(data))

    assert metadata.photo_taken == datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def test_capture_time_from_exif_ifd(camera_jpeg):
    metadata = MetadataExplorer().explore(io.BytesIO(camera_jpeg))

    assert metadata.photo_taken == datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    assert metadata.made_by == "FUJIFILM"
    assert metadata.model == "X-T4"


def test_offset_from_exif_ifd():
    data = make_jpeg(exif=make_camera_exif(taken="2020:01:01 05:00:00", offset="-05:00"))

    metadata = MetadataExplorer().explore(io.BytesIO(data))

    assert metadata.photo_taken == datetime(2020, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def test_parse_exif_datetime():
    assert parse_exif_datetime("2020:01:01 10:00:00") == datetime(2020, 1, 1, 10, tzinfo=timezone.utc)
    assert parse_exif_datetime(b"2020:01:01 10:00:00\x00") == datetime(2020, 1, 1, 10, tzinfo=timezone.utc)
    assert parse_exif_datetime("0000:00:00 00:00:00") is None
    assert parse_exif_datetime("") is None
    assert parse_exif_datetime(None) is None


def test_parse_exif_datetime_with_offsets():
    expected = datetime(2020, 1, 1, 10, tzinfo=timezone.utc)

    assert parse_exif_datetime("2020:01:01 12:00:00", "+02:00") == expected
    assert parse_exif_datetime("2020:01:01 10:00:00", "   :  ") == expected
    assert parse_exif_datetime("2020:01:01 10:00:00", b"\x00\x00") == expected
    assert parse_exif_datetime("2020:01:01 10:00:00", "garbage") == expected
    assert parse_exif_datetime("not a date", "+02:00") is None
