"""Data models for upload notifications and photo metadata records."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import unquote_plus

from photoingest.storage.exceptions import InvalidEventError


def _section(parent: Dict[str, Any], name: str, key: Optional[str] = None) -> Dict[str, Any]:
    """Return a nested mapping of a notification record, empty when absent."""
    value = parent.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidEventError(
            f"Notification field '{name}' must be a mapping, got {type(value).__name__}",
            key=key
        )
    return value


@dataclass(frozen=True)
class UploadEvent:
    """One upload notification record.

    Attributes:
        source_bucket: Bucket holding the uploaded original
        source_key: Key of the uploaded original (URL-decoded)
        user_id: Owning user identifier
        principal_id: Principal that performed the upload
    """
    source_bucket: str
    source_key: str
    user_id: str
    principal_id: str

    @classmethod
    def from_event_record(cls, record: Dict[str, Any]) -> "UploadEvent":
        """Create UploadEvent from an object-created notification record.

        The user identifier is the last ``:``-separated segment of the
        uploader's principal id, so ``AWS:AROAEXAMPLE:alice`` belongs to
        ``alice`` and a plain ``alice`` stays ``alice``.

        Args:
            record: One entry of the notification's ``Records`` list

        Returns:
            UploadEvent instance

        Raises:
            InvalidEventError: If the bucket, key or principal id is missing
                or the record does not have the notification shape
        """
        if not isinstance(record, dict):
            raise InvalidEventError(
                f"Notification record must be a mapping, got {type(record).__name__}"
            )
        s3 = _section(record, "s3")
        raw_key = _section(s3, "object").get("key")
        if not raw_key:
            raise InvalidEventError("Notification record has no object key")
        if not isinstance(raw_key, str):
            raise InvalidEventError(f"Notification object key is not a string: {raw_key!r}")
        source_key = unquote_plus(raw_key)

        bucket = _section(s3, "bucket", source_key).get("name")
        if not bucket or not isinstance(bucket, str):
            raise InvalidEventError(
                "Notification record has no bucket name", key=source_key
            )
        principal_id = _section(record, "userIdentity", source_key).get("principalId")
        if not principal_id or not isinstance(principal_id, str):
            raise InvalidEventError(
                "Notification record has no user identity", key=source_key
            )

        user_id = principal_id.rsplit(":", 1)[-1]
        if not user_id:
            raise InvalidEventError(
                f"Cannot derive user id from principal {principal_id!r}",
                key=source_key
            )

        return cls(
            source_bucket=bucket,
            source_key=source_key,
            user_id=user_id,
            principal_id=principal_id,
        )

    def __str__(self) -> str:
        """Return string representation of the event."""
        return f"UploadEvent(s3://{self.source_bucket}/{self.source_key}, user={self.user_id})"


@dataclass
class PhotoRecord:
    """Metadata record persisted once per processed photo.

    Identity is the composite ``(user_id, photo_key)``.

    Attributes:
        user_id: Owning user identifier (partition key)
        photo_key: Key of the web-size derivative (sort key)
        photo_taken_date: ISO calendar date of the resolved timestamp
        photo_taken_time: ISO local time of the resolved timestamp
        thumbnail_key: Key of the thumbnail derivative
        bucket: Bucket holding both derivatives
        principal_id: Principal that performed the upload
        src_photo_name: Key of the uploaded original
        made_by: Camera manufacturer (if known)
        model: Camera model (if known)
        warning: Explanation when capture metadata was unavailable
    """
    user_id: str
    photo_key: str
    photo_taken_date: str
    photo_taken_time: str
    thumbnail_key: str
    bucket: str
    principal_id: str
    src_photo_name: str
    made_by: Optional[str] = None
    model: Optional[str] = None
    warning: Optional[str] = None

    def to_item(self) -> Dict[str, str]:
        """Build the table item; optional attributes appear only when set."""
        item = {
            "userId": self.user_id,
            "photoKey": self.photo_key,
            "photoTakenDate": self.photo_taken_date,
            "photoTakenTime": self.photo_taken_time,
            "thumbnailKey": self.thumbnail_key,
            "bucket": self.bucket,
            "principalId": self.principal_id,
            "srcPhotoName": self.src_photo_name,
        }
        optional = {
            "madeBy": self.made_by,
            "model": self.model,
            "warning": self.warning,
        }
        item.update({name: value for name, value in optional.items() if value is not None})
        return item
