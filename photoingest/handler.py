"""Function-style entry point for upload notification deliveries."""

import logging
from typing import Any, Dict, Optional

from photoingest.config import ConfigManager
from photoingest.processing import BatchProcessingError, PhotoProcessor

logger = logging.getLogger(__name__)

_processor: Optional[PhotoProcessor] = None


def get_processor() -> PhotoProcessor:
    """Return the processor shared by invocations, creating it on first use."""
    global _processor
    if _processor is None:
        config = ConfigManager.load()
        logging.getLogger().setLevel(str(config.get("logging.level", "INFO")).upper())
        _processor = PhotoProcessor(config)
    return _processor


def handle(event: Dict[str, Any], context: Any = None,
           processor: Optional[PhotoProcessor] = None) -> Dict[str, Any]:
    """Process one notification delivery.

    Every record is attempted even if earlier ones fail.

    Args:
        event: Notification delivery of the form ``{"Records": [...]}``
        context: Invocation context supplied by the runtime (unused)
        processor: Processor to use (defaults to the shared one)

    Returns:
        Summary with ``processed``, ``errors`` and per-record ``results``

    Raises:
        BatchProcessingError: If ``processing.raise_on_error`` is set and at
            least one record failed
    """
    processor = processor or get_processor()
    stats = processor.process_event(event)

    summary = {
        "processed": stats.processed,
        "errors": stats.errors,
        "results": [result.to_dict() for result in stats.results],
    }

    if stats.errors and processor.config.get("processing.raise_on_error", False):
        failed = [r.source_key for r in stats.results if not r.success]
        raise BatchProcessingError(
            f"{stats.errors} of {stats.total_records} record(s) failed: {failed}",
            stats=stats
        )

    return summary
