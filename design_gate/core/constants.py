"""Constants for design classification and health-gated admission."""

# Classification
CLASSIFICATION_CONFIDENCE = 0.7  # Fixed heuristic value, not evidence-weighted
ROTATION_ASPECT_THRESHOLD = 1.4  # Rotate when height > width * 1.4
CLASSIFICATION_ID_PREFIX = "analysis_"

DEFAULT_DESIGN_WIDTH_MM = 100
DEFAULT_DESIGN_HEIGHT_MM = 100

# Print standards
BUSINESS_CARD_WIDTH_MM = 85
BUSINESS_CARD_HEIGHT_MM = 55
BUSINESS_CARD_TOLERANCE_MM = 5

# Mimetypes
MIME_PDF = "application/pdf"
MIME_SVG = "image/svg+xml"
MIME_IMAGE_PREFIX = "image/"

SUPPORTED_MIME_TYPES = {
    "application/pdf",
    "image/svg+xml",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "application/postscript",
}

# Health monitoring
METRICS_HISTORY_SIZE = 100  # Snapshots retained in memory
HEALTHY_HEAP_LIMIT_MB = 6000
HEALTHY_CONNECTION_LIMIT = 1000
MONITORING_INTERVAL_SECONDS = 30.0
BYTES_PER_MB = 1024 * 1024

# Batch processing
MAX_BATCH_SIZE = 100
