"""Default configuration values for docsections.

The heading and sufficiency thresholds are empirical reference values.
Override them per pipeline through HeadingHeuristics and IngestConfig.
"""

# Sufficiency: compact (whitespace-free) character floor below which the
# embedded text is treated as unusable and OCR is attempted.
MIN_EMBEDDED_TEXT_CHARACTERS = 25

# Heading heuristics
MAX_HEADING_LENGTH = 80
UPPERCASE_HEADING_RATIO = 0.6
SENTENCE_HEADING_UPPERCASE_RATIO = 0.9
CAPITALIZED_WORD_RATIO = 0.6
MIN_CAPITALIZED_WORDS = 2

# Heading used when body text appears before any heading line
DEFAULT_SECTION_HEADING = "Document"

# Document AI OCR defaults
DOCUMENT_AI_DEFAULTS: dict[str, str | float] = {
    "location": "us",
    "timeout": 60.0,  # seconds
    "scope": "https://www.googleapis.com/auth/cloud-platform",
    "mime_type": "application/pdf",
}

# HTTP server defaults
DEFAULT_SERVER_CONFIG: dict[str, str | int] = {
    "host": "127.0.0.1",
    "port": 8000,
    "cors_origins": "http://localhost:3000",
}

# Downstream client defaults
DEFAULT_INGEST_BASE_URL = "http://localhost:3000"
DEFAULT_INGEST_PATH = "/api/ingest"
DEFAULT_INGEST_TIMEOUT = 120.0  # seconds
