"""Upload-to-derivative pipeline orchestrator."""

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import time

from ..config import ConfigManager
from ..imaging import CachedPhotoBytes, ImageMetadata, ImageResizer, MetadataExplorer, ResizerResult
from ..imaging.resizer import OUTPUT_CONTENT_TYPE, OUTPUT_EXTENSION
from ..storage import BlobStore, PhotoRecord, RecordStore, UploadEvent
from ..storage.exceptions import InvalidEventError
from .exceptions import PhotoProcessingError, PipelineTimeoutError, ProcessingError
from .keys import compose_keys, create_dest_key

logger = logging.getLogger(__name__)

WARNING_NO_METADATA = "Missing photo/image metadata to extract"
WARNING_NO_PHOTO_TAKEN = (
    "Missing photo taken date - date/time of the upload event has been used as a default"
)


@dataclass
class ProcessingResult:
    """Result of processing a single upload notification record.

    Attributes:
        source_key: Key of the uploaded original (None if the record was unusable)
        success: Whether processing succeeded
        user_id: Owning user identifier
        photo_key: Key of the web-size derivative
        thumbnail_key: Key of the thumbnail derivative
        photo_taken: Resolved timestamp used for the keys
        warning: Warning recorded on the metadata record
        processing_time: Time taken to process (seconds)
        error: Error message if failed
    """
    source_key: Optional[str]
    success: bool = False
    user_id: Optional[str] = None
    photo_key: Optional[str] = None
    thumbnail_key: Optional[str] = None
    photo_taken: Optional[datetime] = None
    warning: Optional[str] = None
    processing_time: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly summary of the result."""
        return {
            "sourceKey": self.source_key,
            "success": self.success,
            "userId": self.user_id,
            "photoKey": self.photo_key,
            "thumbnailKey": self.thumbnail_key,
            "photoTaken": self.photo_taken.isoformat() if self.photo_taken else None,
            "warning": self.warning,
            "error": self.error,
        }


@dataclass
class BatchProcessingStats:
    """Statistics for one notification delivery.

    Attributes:
        total_records: Number of records in the delivery
        processed: Number successfully processed
        errors: Number that failed
        total_time: Total processing time (seconds)
        results: Individual processing results, in delivery order
    """
    total_records: int
    processed: int = 0
    errors: int = 0
    total_time: float = 0.0
    results: List[ProcessingResult] = field(default_factory=list)


class Deadline:
    """Wall-clock budget for one photo's pipeline.

    A budget of None or 0 never expires.
    """

    def __init__(
        self,
        seconds: Optional[float],
        source_key: str,
        timer: Callable[[], float] = time.monotonic
    ) -> None:
        self.seconds = seconds
        self.source_key = source_key
        self._timer = timer
        self._started = timer()

    def check(self, stage: str) -> None:
        """Raise PipelineTimeoutError if the budget is spent.

        Args:
            stage: Name of the stage that just finished (for the message)
        """
        if not self.seconds:
            return
        elapsed = self._timer() - self._started
        if elapsed > self.seconds:
            raise PipelineTimeoutError(
                self.source_key,
                message=f"Deadline of {self.seconds}s exceeded after {stage} ({elapsed:.1f}s)"
            )


def resolve_photo_taken(
    metadata: Optional[ImageMetadata],
    now: datetime
) -> Tuple[datetime, Optional[str]]:
    """Pick the timestamp a photo is filed under and the warning it implies.

    Args:
        metadata: Extracted metadata, or None if none could be extracted
        now: Current processing time, used as the fallback

    Returns:
        Tuple of (timestamp, warning); warning is None when the capture
        time was available
    """
    if metadata is None:
        return now, WARNING_NO_METADATA
    if metadata.photo_taken is None:
        return now, WARNING_NO_PHOTO_TAKEN
    return metadata.photo_taken, None


def build_photo_record(
    event: UploadEvent,
    metadata: Optional[ImageMetadata],
    photo_taken: datetime,
    warning: Optional[str],
    photo_key: str,
    thumbnail_key: str,
    bucket: str
) -> PhotoRecord:
    """Assemble the metadata record for a processed photo.

    Camera make and model are copied only when the metadata carries them.
    """
    return PhotoRecord(
        user_id=event.user_id,
        photo_key=photo_key,
        photo_taken_date=photo_taken.date().isoformat(),
        photo_taken_time=photo_taken.time().isoformat(),
        thumbnail_key=thumbnail_key,
        bucket=bucket,
        principal_id=event.principal_id,
        src_photo_name=event.source_key,
        made_by=metadata.made_by if metadata else None,
        model=metadata.model if metadata else None,
        warning=warning,
    )


class PhotoProcessor:
    """Orchestrates the upload-to-derivative pipeline.

    For each uploaded photo this class coordinates:
    - Reading the original once into a re-readable buffer
    - EXIF capture metadata extraction
    - Key derivation from the capture time (or processing time)
    - Web-size and thumbnail resizing
    - Derivative writes and the metadata record write

    Records of one delivery are processed one after another; each record is
    isolated, so a failure never stops or rolls back its siblings.
    """

    def __init__(
        self,
        config: ConfigManager,
        blob_store: Optional[BlobStore] = None,
        record_store: Optional[RecordStore] = None,
        metadata_explorer: Optional[MetadataExplorer] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timer: Optional[Callable[[], float]] = None,
        dry_run: bool = False
    ) -> None:
        """Initialize photo processor.

        Args:
            config: Configuration manager
            blob_store: Blob store for originals and derivatives (created if not provided)
            record_store: Metadata record store (created if not provided)
            metadata_explorer: Metadata extractor (created if not provided)
            clock: Returns the current processing time (defaults to UTC now)
            timer: Monotonic timer used for deadlines
            dry_run: If True, skip the derivative and record writes
        """
        self.config = config
        self.dry_run = dry_run

        self.bucket = config.get("storage.bucket")
        self.table = config.get("storage.table")
        region = config.get("storage.region")
        endpoint_url = config.get("storage.endpoint_url")

        if blob_store:
            self.blob_store = blob_store
        else:
            self.blob_store = BlobStore(self.bucket, region=region, endpoint_url=endpoint_url)

        if record_store:
            self.record_store = record_store
        else:
            self.record_store = RecordStore(self.table, region=region, endpoint_url=endpoint_url)

        self.explorer = metadata_explorer or MetadataExplorer()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.timer = timer or time.monotonic

        self.key_prefix = config.get("processing.key_prefix", "photos/")
        self.web_size = config.get("processing.web_size", 1080)
        self.thumbnail_size = config.get("processing.thumbnail_size", 300)
        self.quality = config.get("processing.jpeg_quality", 85)
        self.timeout = config.get("processing.timeout", 0)

        logger.info(
            f"PhotoProcessor initialized: bucket={self.bucket}, table={self.table}, "
            f"sizes={self.web_size}/{self.thumbnail_size}, dry_run={dry_run}"
        )

    def process_event(self, event: Dict[str, Any]) -> BatchProcessingStats:
        """Process a notification delivery of the form ``{"Records": [...]}``."""
        return self.process_records(event.get("Records") or [])

    def process_records(self, records: Iterable[Dict[str, Any]]) -> BatchProcessingStats:
        """Process notification records independently of each other.

        Args:
            records: Raw notification records

        Returns:
            BatchProcessingStats with one result per record
        """
        records = list(records)
        start_time = time.time()
        stats = BatchProcessingStats(total_records=len(records))

        if not records:
            logger.warning("Notification contains no records")
            return stats

        for i, record in enumerate(records, 1):
            result = self._process_record(record, i, len(records))
            stats.results.append(result)

            if result.success:
                stats.processed += 1
            else:
                stats.errors += 1

        stats.total_time = time.time() - start_time

        logger.info(
            f"Batch complete: {stats.processed} processed, {stats.errors} errors "
            f"(Total time: {stats.total_time:.1f}s)"
        )
        return stats

    def _process_record(self, record: Dict[str, Any], index: int, total: int) -> ProcessingResult:
        """Process one raw record, capturing any failure in the result."""
        start_time = time.time()

        try:
            event = UploadEvent.from_event_record(record)
        except InvalidEventError as e:
            logger.error(f"[{index}/{total}] Skipping invalid notification record: {e}")
            return ProcessingResult(
                source_key=e.key,
                error=str(e),
                processing_time=time.time() - start_time
            )
        except Exception as e:
            logger.error(
                f"[{index}/{total}] Unreadable notification record: {e}", exc_info=True
            )
            return ProcessingResult(
                source_key=None,
                error=f"{type(e).__name__}: {e}",
                processing_time=time.time() - start_time
            )

        logger.info(f"[{index}/{total}] Processing: {event.source_key}")
        try:
            return self.process_upload(event)
        except ProcessingError as e:
            logger.error(f"  {e}", exc_info=True)
            return ProcessingResult(
                source_key=event.source_key,
                user_id=event.user_id,
                error=str(e),
                processing_time=time.time() - start_time
            )

    def process_upload(self, event: UploadEvent) -> ProcessingResult:
        """Run the full pipeline for one uploaded photo.

        Both derivatives are produced before anything is written, so an
        undecodable upload leaves no trace in storage. A failing record write
        after the derivative writes is not compensated.

        Args:
            event: Upload notification record

        Returns:
            ProcessingResult for the successful run

        Raises:
            PhotoProcessingError: If any stage fails (wraps the cause)
            PipelineTimeoutError: If the configured deadline is exceeded
        """
        start_time = time.time()
        deadline = Deadline(self.timeout, event.source_key, timer=self.timer)

        try:
            logger.info(f"File uploaded: {event.source_key}")
            photo = CachedPhotoBytes(
                self.blob_store.get_object_bytes(event.source_bucket, event.source_key)
            )
            deadline.check("reading the original")

            metadata = self.explorer.explore(photo.open())
            photo_taken, warning = resolve_photo_taken(metadata, self.clock())
            if warning:
                logger.info(f"  {warning}")

            base_key = create_dest_key(photo_taken, OUTPUT_EXTENSION)
            photo_key, thumbnail_key = compose_keys(event.user_id, base_key, self.key_prefix)
            logger.debug(f"  Keys: {photo_key}, {thumbnail_key}")

            web = ImageResizer(photo.open(), self.web_size, self.quality).resize()
            deadline.check("web resize")
            thumbnail = ImageResizer(photo.open(), self.thumbnail_size, self.quality).resize()
            deadline.check("thumbnail resize")

            record = build_photo_record(
                event, metadata, photo_taken, warning,
                photo_key, thumbnail_key, self.bucket
            )

            if not self.dry_run:
                self._put_derivative(photo_key, web)
                deadline.check("web derivative write")
                self._put_derivative(thumbnail_key, thumbnail)
                deadline.check("thumbnail derivative write")
                self.record_store.put_item(record)
            else:
                logger.info("  [DRY RUN] Would write:")
                logger.info(f"    {photo_key} ({web.size} bytes)")
                logger.info(f"    {thumbnail_key} ({thumbnail.size} bytes)")
                logger.info(f"    Record: {record.to_item()}")

        except ProcessingError:
            raise
        except Exception as e:
            raise PhotoProcessingError(event.source_key, e) from e

        return ProcessingResult(
            source_key=event.source_key,
            success=True,
            user_id=event.user_id,
            photo_key=photo_key,
            thumbnail_key=thumbnail_key,
            photo_taken=photo_taken,
            warning=warning,
            processing_time=time.time() - start_time,
        )

    def _put_derivative(self, key: str, result: ResizerResult) -> None:
        """Write one derivative with its exact length and the output content type."""
        self.blob_store.put_object(
            key,
            result.stream,
            content_length=result.size,
            content_type=OUTPUT_CONTENT_TYPE,
        )
