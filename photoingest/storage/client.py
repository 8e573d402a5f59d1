"""Blob and record storage clients backed by S3 and DynamoDB."""

import logging
from typing import Any, BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from photoingest.storage.models import PhotoRecord
from photoingest.storage.exceptions import StorageError, StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


def _error_code(error: Exception) -> Optional[str]:
    """Return the service error code of a botocore error, if any."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class BlobStore:
    """Writes derivatives to a fixed destination bucket and reads originals.

    Attributes:
        bucket: Destination bucket for every write
        s3: boto3 S3 client
    """

    def __init__(
        self,
        bucket: str,
        s3_client: Optional[Any] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None
    ) -> None:
        """Initialize blob store.

        Args:
            bucket: Destination bucket name
            s3_client: Preconfigured boto3 S3 client (created if not provided)
            region: AWS region for a created client
            endpoint_url: Custom endpoint for a created client
        """
        self.bucket = bucket
        if s3_client is None:
            try:
                s3_client = boto3.client("s3", region_name=region, endpoint_url=endpoint_url)
            except BotoCoreError as e:
                raise StorageError(f"Failed to create S3 client: {e}") from e
        self.s3 = s3_client
        logger.info(f"Blob store initialized for bucket '{bucket}'")

    def put_object(
        self,
        key: str,
        stream: BinaryIO,
        content_length: int,
        content_type: str
    ) -> None:
        """Write one object to the destination bucket.

        ``content_length`` must be the exact size of ``stream``; the stream
        itself does not carry its length.

        Raises:
            StorageWriteError: If the write fails
        """
        logger.debug(f"Writing s3://{self.bucket}/{key} ({content_length} bytes, {content_type})")
        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=stream,
                ContentLength=content_length,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageWriteError(
                f"Failed to write s3://{self.bucket}/{key}: {e}",
                key=key,
                error_code=_error_code(e)
            ) from e

        logger.info(f"Stored s3://{self.bucket}/{key}")

    def get_object_bytes(self, bucket: str, key: str) -> bytes:
        """Read the full content of an uploaded object.

        Raises:
            StorageReadError: If the object cannot be read
        """
        logger.debug(f"Reading s3://{bucket}/{key}")
        try:
            response = self.s3.get_object(Bucket=bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except (ClientError, BotoCoreError) as e:
            raise StorageReadError(
                f"Failed to read s3://{bucket}/{key}: {e}",
                key=key,
                error_code=_error_code(e)
            ) from e


class RecordStore:
    """Persists photo metadata records to a table keyed by (userId, photoKey).

    Attributes:
        table_name: Name of the metadata table
        table: boto3 DynamoDB Table resource
    """

    def __init__(
        self,
        table_name: str,
        dynamodb_resource: Optional[Any] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None
    ) -> None:
        """Initialize record store.

        Args:
            table_name: Metadata table name
            dynamodb_resource: Preconfigured boto3 DynamoDB resource
            region: AWS region for a created resource
            endpoint_url: Custom endpoint for a created resource
        """
        self.table_name = table_name
        if dynamodb_resource is None:
            try:
                dynamodb_resource = boto3.resource(
                    "dynamodb", region_name=region, endpoint_url=endpoint_url
                )
            except BotoCoreError as e:
                raise StorageError(f"Failed to create DynamoDB resource: {e}") from e
        self.table = dynamodb_resource.Table(table_name)
        logger.info(f"Record store initialized for table '{table_name}'")

    def put_item(self, record: PhotoRecord) -> None:
        """Upsert one record.

        Raises:
            StorageWriteError: If the write fails
        """
        try:
            self.table.put_item(Item=record.to_item())
        except (ClientError, BotoCoreError) as e:
            raise StorageWriteError(
                f"Failed to write record {record.user_id}/{record.photo_key} "
                f"to table {self.table_name}: {e}",
                key=record.photo_key,
                error_code=_error_code(e)
            ) from e

        logger.info(f"Recorded {record.user_id}/{record.photo_key} in {self.table_name}")
