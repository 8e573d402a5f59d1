"""Default configuration values for photoIngest."""

# Default configuration dictionary
DEFAULT_CONFIG = {
    # Destination storage (S3 bucket for derivatives, DynamoDB table for records)
    "storage": {
        "bucket": "000-photos",
        "table": "000-photos",
        "region": None,
        "endpoint_url": None,
    },
    
    # Processing Configuration
    "processing": {
        "key_prefix": "photos/",
        "web_size": 1080,
        "thumbnail_size": 300,
        "jpeg_quality": 85,
        "timeout": 0,  # Seconds per event, 0 disables the deadline
        "raise_on_error": False,
    },
    
    # Logging Configuration
    "logging": {
        "level": "INFO",
        "file": None,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

# Required configuration fields (must resolve to a non-empty value)
REQUIRED_FIELDS = [
    "storage.bucket",
    "storage.table",
]

# Environment variables that override configuration values
ENV_OVERRIDES = {
    "PHOTOINGEST_BUCKET": "storage.bucket",
    "PHOTOINGEST_TABLE": "storage.table",
    "PHOTOINGEST_REGION": "storage.region",
    "PHOTOINGEST_LOG_LEVEL": "logging.level",
}

# Configuration field descriptions used in validation messages
FIELD_DESCRIPTIONS = {
    "storage.bucket": "Destination bucket for web-size and thumbnail derivatives",
    "storage.table": "Table receiving one metadata record per processed photo",
}
