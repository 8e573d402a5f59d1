"""Shared fixtures: generated photos, notification records and mock stores."""

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from PIL import Image

from photoingest.config import ConfigManager
from photoingest.processing import PhotoProcessor

FIXED_NOW = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


def make_exif(taken=None, make=None, model=None, offset=None) -> Image.Exif:
    """Build EXIF data with the given capture attributes (all in IFD0)."""
    exif = Image.Exif()
    if make is not None:
        exif[271] = make
    if model is not None:
        exif[272] = model
    if taken is not None:
        exif[36867] = taken
    if offset is not None:
        exif[36881] = offset
    return exif


def make_camera_exif(taken, make=None, model=None, offset=None) -> Image.Exif:
    """Build EXIF data the way cameras write it: capture tags in the Exif IFD."""
    exif = make_exif(make=make, model=model)
    exif_ifd = exif.get_ifd(0x8769)
    exif_ifd[36867] = taken
    if offset is not None:
        exif_ifd[36881] = offset
    return exif


def make_jpeg(width=1600, height=1200, exif=None, color=(180, 90, 40)) -> bytes:
    """Encode a solid-color JPEG, optionally carrying EXIF data."""
    image = Image.new("RGB", (width, height), color)
    out = io.BytesIO()
    if exif is not None:
        image.save(out, format="JPEG", exif=exif)
    else:
        image.save(out, format="JPEG")
    return out.getvalue()


def make_png(width=640, height=480) -> bytes:
    image = Image.new("RGBA", (width, height), (10, 200, 30, 128))
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


def s3_record(key="uploads/IMG_0001.jpg", principal="AWS:AROAEXAMPLE:u1", bucket="upload-bucket"):
    """Build one object-created notification record."""
    return {
        "eventName": "ObjectCreated:Put",
        "userIdentity": {"principalId": principal},
        "s3": {
            "bucket": {"name": bucket},
            "object": {"key": key, "size": 1234},
        },
    }


@pytest.fixture
def full_exif_jpeg():
    return make_jpeg(exif=make_exif(taken="2020:01:01 10:00:00", make="Canon", model="EOS R5"))


@pytest.fixture
def camera_jpeg():
    return make_jpeg(exif=make_camera_exif(
        taken="2020:01:01 10:00:00", make="FUJIFILM", model="X-T4"
    ))


@pytest.fixture
def no_date_jpeg():
    return make_jpeg(exif=make_exif(make="NIKON CORPORATION", model="Z 6"))


@pytest.fixture
def plain_jpeg():
    return make_jpeg()


@pytest.fixture
def corrupt_bytes():
    return b"this is definitely not an image"


@pytest.fixture
def config():
    return ConfigManager.from_dict({
        "storage": {"bucket": "dest-bucket", "table": "photos-table"},
    })


@pytest.fixture
def blob_store():
    return MagicMock()


@pytest.fixture
def record_store():
    return MagicMock()


@pytest.fixture
def processor(config, blob_store, record_store):
    return PhotoProcessor(
        config=config,
        blob_store=blob_store,
        record_store=record_store,
        clock=lambda: FIXED_NOW,
    )
